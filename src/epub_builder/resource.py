"""EPUB에 포함되는 바이너리 리소스 (이미지, 폰트, 오디오, 비디오)"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from epub_builder.errors import SourceReadError


class ResourceKind(Enum):
    JPG = "jpg"
    PNG = "png"
    GIF = "gif"
    SVG = "svg"
    FONT = "font"
    AUDIO = "audio"
    VIDEO = "video"

    @property
    def is_image(self) -> bool:
        return self in _IMAGE_KINDS

    @classmethod
    def from_filename(cls, filename: str) -> "ResourceKind":
        """확장자로 리소스 종류를 추정합니다.

        Raises:
            ValueError: 지원하지 않는 확장자인 경우
        """
        ext = os.path.splitext(filename)[1].lower()
        try:
            return _EXTENSION_KINDS[ext]
        except KeyError:
            raise ValueError(f"지원하지 않는 리소스 확장자입니다: {filename}") from None


_IMAGE_KINDS = frozenset({ResourceKind.JPG, ResourceKind.PNG, ResourceKind.GIF, ResourceKind.SVG})

_EXTENSION_KINDS = {
    ".jpg": ResourceKind.JPG,
    ".jpeg": ResourceKind.JPG,
    ".png": ResourceKind.PNG,
    ".gif": ResourceKind.GIF,
    ".svg": ResourceKind.SVG,
    ".ttf": ResourceKind.FONT,
    ".otf": ResourceKind.FONT,
    ".mp3": ResourceKind.AUDIO,
    ".mp4": ResourceKind.VIDEO,
}

_MEDIA_TYPES = {
    ResourceKind.JPG: "image/jpeg",
    ResourceKind.PNG: "image/png",
    ResourceKind.GIF: "image/gif",
    ResourceKind.SVG: "image/svg+xml",
    ResourceKind.AUDIO: "audio/mpeg",
    ResourceKind.VIDEO: "video/mp4",
}


@dataclass(frozen=True)
class Resource:
    """리소스 파일.

    data가 주어지면 메모리의 바이트를 사용하고, 없으면 path에서 읽습니다.
    아카이브 안에서는 path의 파일명(base name)으로 저장됩니다.
    """
    kind: ResourceKind
    path: str
    data: Optional[bytes] = None

    @classmethod
    def from_path(cls, path, data=None) -> "Resource":
        return cls(ResourceKind.from_filename(str(path)), str(path), data)

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    @property
    def is_image(self) -> bool:
        return self.kind.is_image

    @property
    def media_type(self) -> str:
        if self.kind is ResourceKind.FONT:
            if self.path.endswith("ttf"):
                return "application/x-font-ttf"
            return "application/vnd.ms-opentype"
        return _MEDIA_TYPES[self.kind]

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        try:
            return Path(self.path).read_bytes()
        except OSError as e:
            raise SourceReadError(self.path, e.strerror or str(e)) from e
