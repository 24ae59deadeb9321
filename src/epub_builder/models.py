"""JSON 책 명세의 요청 모델 (CLI 입력 파일과 POST /epub 본문)"""

import base64
import binascii
import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from epub_builder.metadata import IdentifierScheme
from epub_builder.reftype import RefKind
from epub_builder.resource import ResourceKind


def check_archive_name(value):
    """아카이브 항목 이름으로 쓰일 파일명 검사. 디렉토리 구분자와 '..'를 거부합니다."""
    if value is None:
        return value
    if not value or "/" in value or "\\" in value or ".." in value:
        raise ValueError(f"파일명에 경로를 포함할 수 없습니다: {value!r}")
    return value


def check_not_blank(value):
    if not value.strip():
        raise ValueError("빈 문자열은 허용되지 않습니다")
    return value


class IdentifierSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scheme: IdentifierScheme = IdentifierScheme.UUID
    value: Optional[str] = None

    @field_validator("scheme", mode="before")
    @classmethod
    def scheme_upper(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def isbn_needs_value(self):
        if self.scheme is IdentifierScheme.ISBN and not self.value:
            raise ValueError("ISBN 식별자에는 value가 필요합니다")
        return self


class MetadataSpec(BaseModel):
    title: str
    identifier: Union[IdentifierSpec, str, None] = None
    language: Optional[str] = None
    creator: Optional[str] = None
    contributor: Optional[str] = None
    publisher: Optional[str] = None
    date: Optional[datetime.date] = None
    subject: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return check_not_blank(value)


class TextBodySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str


class PathBodySpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str


BodySpec = Union[str, TextBodySpec, PathBodySpec]


class ResourceSpec(BaseModel):
    """'path'로 파일을 가리키거나 'filename' + base64 'data'로 바이트를 직접 전달"""
    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = None
    filename: Optional[str] = None
    data: Optional[str] = None
    kind: Optional[ResourceKind] = None

    @field_validator("filename")
    @classmethod
    def filename_is_plain(cls, value):
        return check_archive_name(value)

    @field_validator("kind", mode="before")
    @classmethod
    def kind_lower(cls, value):
        return value.lower() if isinstance(value, str) else value

    @model_validator(mode="after")
    def path_or_data(self):
        if self.data is not None:
            if self.filename is None:
                raise ValueError("'data'를 사용할 때는 'filename'이 필요합니다")
            self.decoded_data()
        elif self.path is None:
            raise ValueError("'path' 또는 'data' 항목이 필요합니다")
        return self

    def decoded_data(self) -> Optional[bytes]:
        if self.data is None:
            return None
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("base64 데이터가 올바르지 않습니다") from None


class ReferenceSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    id: Optional[str] = None
    children: List[Union["ReferenceSpec", str]] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return check_not_blank(value)


class ContentSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    body: BodySpec
    reference_type: RefKind = RefKind.TEXT
    title: Optional[str] = None
    filename: Optional[str] = None
    references: List[Union[ReferenceSpec, str]] = Field(default_factory=list)
    children: List["ContentSpec"] = Field(default_factory=list)

    @field_validator("filename")
    @classmethod
    def filename_is_plain(cls, value):
        return check_archive_name(value)

    @field_validator("reference_type", mode="before")
    @classmethod
    def reference_type_name(cls, value):
        if isinstance(value, str):
            return RefKind.from_name(value)
        return value

    @property
    def label(self) -> str:
        return self.title or self.reference_type.value.replace("-", " ").title()


class BookDescription(BaseModel):
    """책 명세 전체"""

    metadata: MetadataSpec
    stylesheet: Optional[BodySpec] = None
    cover_image: Optional[ResourceSpec] = None
    resources: List[ResourceSpec] = Field(default_factory=list)
    contents: List[ContentSpec] = Field(default_factory=list)
