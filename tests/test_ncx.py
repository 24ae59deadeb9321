from lxml import etree

from epub_builder.body import RawBody
from epub_builder.content import Content, ContentReference, Document
from epub_builder.converter.ncx import toc_ncx
from epub_builder.converter.xhtml import create_section_files
from epub_builder.metadata import Identifier, Metadata
from epub_builder.reftype import ReferenceType

NS = {"ncx": "http://www.daisy.org/z3986/2005/ncx/"}


def section(label, *children, references=(), filename=None):
    return Content(
        body=RawBody("<p>Test</p>"),
        reference_type=ReferenceType.text(label),
        references=references,
        children=children,
        filename=filename,
    )


def document(*contents):
    return Document(
        metadata=Metadata(title="Navigation", identifier=Identifier.isbn("978")),
        contents=contents,
    )


def nav_points(file_content):
    root = etree.fromstring(file_content.data)
    return [
        (
            point.get("id"),
            int(point.get("playOrder")),
            point.findtext("ncx:navLabel/ncx:text", namespaces=NS),
            point.find("ncx:content", NS).get("src"),
        )
        for point in root.iterfind(".//ncx:navPoint", NS)
    ]


def test_toc_with_reference():
    doc = document(section("Chapter 1", references=[ContentReference("Section 1.1")]))

    ncx = toc_ncx(doc)

    assert ncx.filepath == "OEBPS/toc.ncx"
    assert 'playOrder="1"' in ncx.text
    assert 'playOrder="2"' in ncx.text
    assert nav_points(ncx) == [
        ("navPoint-1", 1, "Chapter 1", "c01.xhtml"),
        ("navPoint-1-1", 2, "Section 1.1", "c01.xhtml#id01"),
    ]


def test_link_number_is_shared_by_nested_references():
    doc = document(section(
        "Chapter 1",
        references=[ContentReference("Section 1.1", children=[ContentReference("Section 1.1.1")])],
    ))

    assert nav_points(toc_ncx(doc))[1:] == [
        ("navPoint-1-1", 2, "Section 1.1", "c01.xhtml#id01"),
        ("navPoint-1-1-1", 3, "Section 1.1.1", "c01.xhtml#id02"),
    ]


def test_nav_map_tree():
    doc = document(
        section(
            "A",
            section("B", references=[ContentReference("s1")]),
            references=[
                ContentReference("r1", children=[ContentReference("r1a"), ContentReference("r1b")]),
                ContentReference("r2", id="custom"),
            ],
        ),
        section("C", filename="end.xhtml"),
    )

    ncx = toc_ncx(doc)

    assert nav_points(ncx) == [
        ("navPoint-1", 1, "A", "c01.xhtml"),
        ("navPoint-1-1", 2, "r1", "c01.xhtml#id01"),
        ("navPoint-1-1-1", 3, "r1a", "c01.xhtml#id02"),
        ("navPoint-1-1-2", 4, "r1b", "c01.xhtml#id03"),
        ("navPoint-1-2", 5, "r2", "c01.xhtml#custom"),
        ("navPoint-2", 6, "B", "c02.xhtml"),
        ("navPoint-2-1", 7, "s1", "c02.xhtml#id01"),
        ("navPoint-3", 8, "C", "end.xhtml"),
    ]

    root = etree.fromstring(ncx.data)
    first = root.find("ncx:navMap/ncx:navPoint", NS)
    assert [child.get("id") for child in first.iterfind("ncx:navPoint", NS)] == [
        "navPoint-1-1",
        "navPoint-1-2",
        "navPoint-2",
    ]
    assert root.find(".//ncx:meta[@name='dtb:depth']", NS).get("content") == "3"


def test_head_and_doc_title():
    ncx = toc_ncx(document(section("Only")))
    root = etree.fromstring(ncx.data)

    metas = {meta.get("name"): meta.get("content") for meta in root.iterfind("ncx:head/ncx:meta", NS)}
    assert metas == {
        "dtb:uid": "urn:isbn:978",
        "dtb:depth": "1",
        "dtb:totalPageCount": "0",
        "dtb:maxPageNumber": "0",
    }
    assert root.findtext("ncx:docTitle/ncx:text", namespaces=NS) == "Navigation"


def test_empty_document():
    root = etree.fromstring(toc_ncx(document()).data)
    assert root.find(".//ncx:meta[@name='dtb:depth']", NS).get("content") == "0"
    assert root.find("ncx:navMap", NS) is not None
    assert root.find(".//ncx:navPoint", NS) is None


def test_nav_points_point_at_generated_sections():
    doc = document(
        section("A", section("A.1"), section("A.2", section("A.2.1"))),
        section("B", filename="b.xhtml"),
    )

    content_srcs = [src for _, _, _, src in nav_points(toc_ncx(doc))]
    sections = [fc.filepath[len("OEBPS/"):] for fc in create_section_files(doc)]

    assert content_srcs == sections


def test_labels_are_escaped():
    doc = document(section("Q&A", references=[ContentReference("<intro>")]))
    labels = [label for _, _, label, _ in nav_points(toc_ncx(doc))]
    assert labels == ["Q&A", "<intro>"]
