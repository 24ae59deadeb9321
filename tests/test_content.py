import pytest

from epub_builder.body import FileBody, RawBody
from epub_builder.content import (
    Content,
    ContentReference,
    Counter,
    Document,
    combined_depth,
    document_depth,
    reference_depth,
    resolved_filename,
    structural_depth,
    walk_contents,
)
from epub_builder.errors import SourceReadError
from epub_builder.metadata import Identifier, IdentifierScheme, Language, Metadata, language_code
from epub_builder.reftype import ReferenceType, RefKind
from epub_builder.resource import Resource, ResourceKind


def section(*children, references=(), filename=None):
    return Content(
        body=RawBody(""),
        reference_type=ReferenceType.text("Text"),
        references=references,
        children=children,
        filename=filename,
    )


def ref(*children, id=None):
    return ContentReference("Anchor", children=children, id=id)


def metadata():
    return Metadata(title="Depth", identifier=Identifier.isbn("1"))


def test_reference_depth():
    assert reference_depth(ref()) == 0
    assert reference_depth(ref(ref())) == 1
    assert reference_depth(ref(ref(ref(ref())))) == 3


def test_anchor_name_uses_explicit_id():
    assert ref(id="my-anchor").anchor_name("chapter01.xhtml", 1) == "chapter01.xhtml#my-anchor"


def test_anchor_name_falls_back_to_link_number():
    assert ref().anchor_name("chapter01.xhtml", 5) == "chapter01.xhtml#id05"
    assert ref().anchor_name("c01.xhtml", 12) == "c01.xhtml#id12"


def test_structural_depth():
    assert structural_depth(section()) == 0
    assert structural_depth(section(section(section()))) == 2


def test_structural_depth_follows_first_child_only():
    assert structural_depth(section(section(), section(section(section())))) == 1


def test_combined_depth_mixed():
    content = section(
        section(references=[ref(ref(), ref())]),
        references=[ref(ref())],
    )
    assert combined_depth(content) == 3


def test_combined_depth_follows_first_reference_only():
    content = section(references=[ref(), ref(ref(ref()))])
    assert combined_depth(content) == 1


@pytest.mark.parametrize("content", [
    section(),
    section(section()),
    section(section(section()), references=[ref()]),
    section(references=[ref(ref(ref()))]),
    section(section(references=[ref(ref())]), section()),
])
def test_combined_depth_is_at_least_structural_depth(content):
    assert combined_depth(content) >= structural_depth(content)


@pytest.mark.parametrize("contents, expected", [
    ([], 0),
    ([section(), section()], 1),
    ([section(section(section()))], 3),
    ([section(references=[ref(ref(ref()))])], 4),
    ([section(section(), references=[ref(ref())])], 3),
])
def test_document_depth(contents, expected):
    assert document_depth(Document(metadata=metadata(), contents=contents)) == expected


def test_resolved_filename():
    assert resolved_filename(section(filename="intro.xhtml"), 1) == "intro.xhtml"
    assert resolved_filename(section(filename="intro.xhtml"), 42) == "intro.xhtml"
    assert resolved_filename(section(), 5) == "c05.xhtml"
    assert section().resolve_filename(123) == "c123.xhtml"


def test_walk_contents_is_pre_order_with_continuous_numbering():
    tree = [section(section(), section(filename="named.xhtml")), section(section())]
    walked = [(number, filename) for number, filename, _ in walk_contents(tree, Counter())]
    assert walked == [
        (1, "c01.xhtml"),
        (2, "c02.xhtml"),
        (3, "named.xhtml"),
        (4, "c04.xhtml"),
        (5, "c05.xhtml"),
    ]


def test_counter_starts_at_one():
    counter = Counter()
    assert counter.next() == 1
    assert counter.next() == 2
    assert counter.value == 2


def test_lists_are_frozen_to_tuples():
    content = section(section(), references=[ref()])
    assert isinstance(content.children, tuple)
    assert isinstance(content.references, tuple)


def test_identifier_urn_and_label():
    isbn = Identifier.isbn("9783161484100")
    assert isbn.urn == "urn:isbn:9783161484100"
    assert isbn.label == "ISBN"
    uuid_id = Identifier.uuid("550e8400-e29b-41d4-a716-446655440000")
    assert str(uuid_id) == "urn:uuid:550e8400-e29b-41d4-a716-446655440000"
    assert uuid_id.label == "UUID"


def test_identifier_generates_uuid():
    generated = Identifier.uuid()
    assert generated.scheme is IdentifierScheme.UUID
    assert len(generated.value) == 36
    assert generated != Identifier.uuid()


def test_identifier_rejects_empty_value():
    with pytest.raises(ValueError):
        Identifier.isbn("")


def test_metadata_requires_title():
    with pytest.raises(ValueError):
        Metadata(title="  ", identifier=Identifier.isbn("1"))


def test_language_codes():
    assert Language.KOREAN.code == "ko"
    assert Language.from_code("ko") is Language.KOREAN
    assert Language.from_code("German") is Language.GERMAN
    assert Language.from_code("xx") is Language.ENGLISH
    assert language_code(None) == "en"
    assert metadata().language_code == "en"


def test_reference_type_label_and_tag():
    foreword = ReferenceType.foreword("Vorwort")
    assert str(foreword) == "Vorwort"
    assert foreword.type == "foreword"
    assert ReferenceType.copyright("©").type == "copyright-page"
    assert RefKind.from_name("title_page") is RefKind.TITLE_PAGE
    assert RefKind.from_name("Title-Page") is RefKind.TITLE_PAGE
    with pytest.raises(ValueError):
        RefKind.from_name("appendix")


@pytest.mark.parametrize("path, media_type", [
    ("images/cover.jpg", "image/jpeg"),
    ("a.png", "image/png"),
    ("a.gif", "image/gif"),
    ("a.svg", "image/svg+xml"),
    ("fonts/serif.ttf", "application/x-font-ttf"),
    ("fonts/serif.otf", "application/vnd.ms-opentype"),
    ("sound.mp3", "audio/mpeg"),
    ("clip.mp4", "video/mp4"),
])
def test_resource_media_types(path, media_type):
    assert Resource.from_path(path).media_type == media_type


def test_resource_filename_and_image_kinds():
    resource = Resource(ResourceKind.PNG, "/tmp/images/figure.png")
    assert resource.filename == "figure.png"
    assert resource.is_image
    assert not Resource(ResourceKind.FONT, "a.ttf").is_image


def test_resource_prefers_in_memory_data(tmp_path):
    assert Resource(ResourceKind.PNG, str(tmp_path / "missing.png"), b"png").read_bytes() == b"png"


def test_resource_read_failure_names_path(tmp_path):
    missing = tmp_path / "missing.png"
    with pytest.raises(SourceReadError) as excinfo:
        Resource(ResourceKind.PNG, str(missing)).read_bytes()
    assert str(missing) in str(excinfo.value)


def test_cover_image_must_be_an_image():
    with pytest.raises(ValueError):
        Document(metadata=metadata(), cover_image=Resource(ResourceKind.FONT, "a.ttf", b""))


def test_bodies(tmp_path):
    path = tmp_path / "chapter.html"
    path.write_text("<p>안녕하세요</p>", encoding="utf-8")

    assert RawBody("<p>a</p>").to_bytes() == b"<p>a</p>"
    assert RawBody(b"<p>a</p>").to_text() == "<p>a</p>"
    assert FileBody(path).to_text() == "<p>안녕하세요</p>"
    assert FileBody(str(path)).to_bytes() == "<p>안녕하세요</p>".encode("utf-8")


def test_file_body_read_failure_names_path(tmp_path):
    missing = tmp_path / "nope.html"
    with pytest.raises(SourceReadError) as excinfo:
        FileBody(missing).to_text()
    assert excinfo.value.source == str(missing)
