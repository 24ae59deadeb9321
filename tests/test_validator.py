import zipfile

import pytest

from epub_builder.body import RawBody
from epub_builder.content import Content, Document
from epub_builder.converter.creator import write_epub
from epub_builder.converter.validator import EpubValidator, ValidationResult


@pytest.fixture
def valid_epub(test_book, tmp_path):
    return write_epub(test_book, tmp_path / "valid.epub")


def rewrite(source, target, skip=(), mimetype_compression=zipfile.ZIP_STORED, mimetype_last=False):
    with zipfile.ZipFile(source) as original:
        entries = [(info.filename, original.read(info)) for info in original.infolist()]
    if mimetype_last:
        entries = entries[1:] + entries[:1]

    with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries:
            if name in skip:
                continue
            compression = mimetype_compression if name == "mimetype" else zipfile.ZIP_DEFLATED
            archive.writestr(name, data, compress_type=compression)
    return target


def categories(result):
    return {issue.category for issue in result.errors}


def test_generated_epub_is_valid(valid_epub):
    result = EpubValidator(valid_epub).validate_all()

    assert result.is_valid
    assert result.summary["error_count"] == 0
    assert result.summary["warning_count"] == 0


def test_compressed_mimetype(valid_epub, tmp_path):
    broken = rewrite(valid_epub, tmp_path / "broken.epub", mimetype_compression=zipfile.ZIP_DEFLATED)
    result = EpubValidator(broken).validate_all()

    assert not result.is_valid
    assert categories(result) == {"container"}
    assert result.summary["invalid_entries"] == ["mimetype"]


def test_mimetype_not_first(valid_epub, tmp_path):
    broken = rewrite(valid_epub, tmp_path / "broken.epub", mimetype_last=True)
    result = EpubValidator(broken).validate_all()

    assert not result.is_valid
    assert "container" in categories(result)


def test_missing_section_file(valid_epub, tmp_path):
    broken = rewrite(valid_epub, tmp_path / "broken.epub", skip={"OEBPS/c01.xhtml"})
    result = EpubValidator(broken).validate_all()

    assert not result.is_valid
    assert "manifest" in categories(result)
    assert "OEBPS/c01.xhtml" in result.summary["invalid_entries"]


def test_missing_package_document(valid_epub, tmp_path):
    broken = rewrite(valid_epub, tmp_path / "broken.epub", skip={"OEBPS/content.opf"})
    result = EpubValidator(broken).validate_all()

    assert not result.is_valid
    assert categories(result) == {"file_structure"}
    assert result.errors[0].entry == "META-INF/container.xml"


def test_not_a_zip(tmp_path):
    path = tmp_path / "plain.epub"
    path.write_bytes(b"not a zip archive")

    result = EpubValidator(path).validate_all()

    assert not result.is_valid
    assert categories(result) == {"container"}


def test_missing_file(tmp_path):
    result = EpubValidator(tmp_path / "nothing.epub").validate_all()
    assert not result.is_valid


def test_malformed_section_is_a_warning(test_book, tmp_path):
    doc = Document(
        metadata=test_book.metadata,
        contents=[Content(body=RawBody("<p>unclosed"), reference_type=test_book.contents[0].reference_type)],
    )

    result = EpubValidator(write_epub(doc, tmp_path / "loose.epub")).validate_all()

    assert result.is_valid
    assert [w.category for w in result.warnings] == ["xml_schema"]
    assert result.warnings[0].entry == "OEBPS/c01.xhtml"


def test_summary_shape():
    result = ValidationResult()
    result.add_warning("ncx", "warn")
    result.add_error("spine", "bad", entry="OEBPS/content.opf", details={"idref": "x"})
    result.add_error("spine", "worse", entry="OEBPS/content.opf")

    summary = result.get_summary()

    assert summary["is_valid"] is False
    assert summary["invalid_entries"] == ["OEBPS/content.opf"]
    assert summary["errors"][0] == {
        "category": "spine", "entry": "OEBPS/content.opf", "message": "bad", "details": {"idref": "x"},
    }
    assert summary["warnings"] == [{"category": "ncx", "entry": None, "message": "warn", "details": {}}]

