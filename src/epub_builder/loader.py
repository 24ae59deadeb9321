"""
JSON 책 명세를 Document로 변환합니다 (CLI, API에서 사용).

명세의 형식 검사는 models.BookDescription이 담당하고, 이 모듈은 검사를 통과한
명세를 콘텐츠 모델로 옮깁니다.

예시:
    {
        "metadata": {"title": "Test Book", "language": "en",
                     "identifier": {"scheme": "isbn", "value": "12345"}},
        "stylesheet": {"text": "body { margin: 0 }"},
        "cover_image": {"path": "cover.jpg"},
        "resources": [{"path": "fonts/serif.ttf"}],
        "contents": [{"reference_type": "foreword", "title": "Foreword",
                      "body": {"text": "<p>Hello World</p>"},
                      "references": [{"title": "Section", "id": "s1"}]}]
    }
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from epub_builder.body import FileBody, RawBody
from epub_builder.content import Content, ContentReference, Document
from epub_builder.errors import BookDescriptionError
from epub_builder.metadata import Identifier, IdentifierScheme, Language, Metadata
from epub_builder.models import BookDescription, PathBodySpec, TextBodySpec
from epub_builder.reftype import ReferenceType
from epub_builder.resource import Resource, ResourceKind

logger = logging.getLogger(__name__)


def load_document_file(path):
    """JSON 파일을 읽어 Document를 만듭니다. 상대 경로는 JSON 파일 위치 기준입니다."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise BookDescriptionError(f"책 명세 파일을 읽을 수 없습니다: {path} ({e.strerror or e})") from e
    except json.JSONDecodeError as e:
        raise BookDescriptionError(f"책 명세 JSON 구문 오류: {path} ({e})") from e
    return load_document(data, base_dir=path.parent)


def load_document(data, base_dir=None, allow_paths=True):
    """책 명세 딕셔너리(또는 BookDescription)를 Document로 변환합니다.

    Args:
        data (dict | BookDescription): 책 명세
        base_dir (str, optional): 상대 경로의 기준 디렉토리
        allow_paths (bool): False이면 'path' 항목을 모두 거부 (원격 요청 처리 시)

    Returns:
        Document

    Raises:
        BookDescriptionError: 명세가 올바르지 않은 경우
    """
    try:
        description = data if isinstance(data, BookDescription) else BookDescription.model_validate(data)
    except ValidationError as e:
        raise BookDescriptionError(f"책 명세가 올바르지 않습니다: {e}") from e

    builder = _DocumentBuilder(base_dir, allow_paths)
    try:
        document = builder.document(description)
    except BookDescriptionError:
        raise
    except ValueError as e:
        raise BookDescriptionError(f"책 명세가 올바르지 않습니다: {e}") from e

    logger.debug(f"책 명세 로드 완료: {document.metadata.title} (루트 섹션 {len(document.contents)}개)")
    return document


class _DocumentBuilder:
    def __init__(self, base_dir, allow_paths):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.allow_paths = allow_paths

    def document(self, description):
        return Document(
            metadata=self.metadata(description.metadata),
            stylesheet=self.body(description.stylesheet) if description.stylesheet is not None else None,
            cover_image=self.resource(description.cover_image) if description.cover_image is not None else None,
            resources=[self.resource(spec) for spec in description.resources],
            contents=[self.content(spec) for spec in description.contents],
        )

    def metadata(self, spec):
        return Metadata(
            title=spec.title,
            identifier=self.identifier(spec.identifier),
            language=Language.from_code(spec.language) if spec.language else None,
            creator=spec.creator,
            contributor=spec.contributor,
            publisher=spec.publisher,
            date=spec.date,
            subject=spec.subject,
            description=spec.description,
        )

    def identifier(self, spec):
        if spec is None:
            return Identifier.uuid()
        if isinstance(spec, str):
            # "urn:isbn:..." 또는 "urn:uuid:..." 형식 허용
            for scheme in IdentifierScheme:
                prefix = f"urn:{scheme.value.lower()}:"
                if spec.lower().startswith(prefix):
                    return Identifier(scheme, spec[len(prefix):])
            return Identifier.uuid(spec)
        if spec.scheme is IdentifierScheme.UUID:
            return Identifier.uuid(spec.value)
        return Identifier(spec.scheme, spec.value)

    def body(self, spec):
        if isinstance(spec, TextBodySpec):
            return RawBody(spec.text)
        if isinstance(spec, PathBodySpec):
            return FileBody(self.path(spec.path))
        return RawBody(spec)

    def resource(self, spec):
        if spec.data is not None:
            path = spec.filename
        else:
            path = self.path(spec.path)
        kind = spec.kind or ResourceKind.from_filename(path)
        return Resource(kind, path, spec.decoded_data())

    def content(self, spec):
        return Content(
            body=self.body(spec.body),
            reference_type=ReferenceType(spec.reference_type, spec.label),
            references=[self.reference(item) for item in spec.references],
            children=[self.content(child) for child in spec.children],
            filename=spec.filename,
        )

    def reference(self, spec):
        if isinstance(spec, str):
            return ContentReference(spec)
        return ContentReference(
            title=spec.title,
            id=spec.id,
            children=[self.reference(item) for item in spec.children],
        )

    def path(self, value):
        if not self.allow_paths:
            raise BookDescriptionError(f"파일 경로는 허용되지 않습니다: {value}")
        path = Path(value)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return str(path)
