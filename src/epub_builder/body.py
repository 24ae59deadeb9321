"""섹션 본문과 스타일시트에 사용되는 바이트 원본 (메모리 / 파일)"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from epub_builder.errors import SourceReadError


@dataclass(frozen=True)
class RawBody:
    """메모리에 이미 존재하는 본문"""
    value: Union[str, bytes]

    def to_bytes(self) -> bytes:
        if isinstance(self.value, bytes):
            return self.value
        return self.value.encode("utf-8")

    def to_text(self) -> str:
        if isinstance(self.value, bytes):
            return self.value.decode("utf-8")
        return self.value


@dataclass(frozen=True)
class FileBody:
    """로컬 파일 경로를 가리키는 본문. 읽기는 호출 시점에 수행됩니다."""
    path: Union[str, Path]

    def to_bytes(self) -> bytes:
        try:
            return Path(self.path).read_bytes()
        except OSError as e:
            raise SourceReadError(self.path, e.strerror or str(e)) from e

    def to_text(self) -> str:
        data = self.to_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceReadError(self.path, "UTF-8 디코딩 실패") from e


Body = Union[RawBody, FileBody]
