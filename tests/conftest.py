import sys
import pathlib

import pytest

# Ensure src/ is on sys.path for test imports
SRC_PATH = pathlib.Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from epub_builder import settings  # noqa: E402
from epub_builder.body import RawBody  # noqa: E402
from epub_builder.content import Content, Document  # noqa: E402
from epub_builder.metadata import Identifier, Language, Metadata  # noqa: E402
from epub_builder.reftype import ReferenceType  # noqa: E402


@pytest.fixture(autouse=True)
def lf_line_endings(monkeypatch):
    """Keep generated XML byte-stable regardless of the host platform."""
    monkeypatch.setattr(settings, "LINE_ENDING", "\n")
    monkeypatch.setattr(settings, "XML_INDENT", 2)


@pytest.fixture
def test_book():
    """Title "Test Book", English, ISBN 12345, one Foreword section."""
    return Document(
        metadata=Metadata(
            title="Test Book",
            language=Language.ENGLISH,
            identifier=Identifier.isbn("12345"),
        ),
        contents=[
            Content(
                body=RawBody("<body>Hello World</body>"),
                reference_type=ReferenceType.foreword("Foreword"),
            )
        ],
    )
