"""서지 메타데이터: 식별자, 언어, Metadata"""

import datetime
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IdentifierScheme(Enum):
    UUID = "UUID"
    ISBN = "ISBN"


_URN_PREFIXES = {
    IdentifierScheme.UUID: "urn:uuid:",
    IdentifierScheme.ISBN: "urn:isbn:",
}


@dataclass(frozen=True)
class Identifier:
    """출판물 고유 식별자 (UUID 또는 ISBN)"""
    scheme: IdentifierScheme
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("식별자 값이 비어 있습니다")

    @classmethod
    def uuid(cls, value=None) -> "Identifier":
        """값을 생략하면 임의의 UUID4를 생성합니다."""
        return cls(IdentifierScheme.UUID, str(value) if value else str(uuid.uuid4()))

    @classmethod
    def isbn(cls, value) -> "Identifier":
        return cls(IdentifierScheme.ISBN, str(value))

    @property
    def label(self) -> str:
        return self.scheme.value

    @property
    def urn(self) -> str:
        return _URN_PREFIXES[self.scheme] + self.value

    def __str__(self):
        return self.urn


class Language(Enum):
    """값은 ISO 639-1 두 글자 코드"""
    ARABIC = "ar"
    BULGARIAN = "bg"
    CHINESE = "zh"
    CROATIAN = "hr"
    CZECH = "cs"
    DANISH = "da"
    DUTCH = "nl"
    ENGLISH = "en"
    ESTONIAN = "et"
    FINNISH = "fi"
    FRENCH = "fr"
    GREEK = "el"
    GERMAN = "de"
    HEBREW = "he"
    HUNGARIAN = "hu"
    ICELANDIC = "is"
    INDONESIAN = "id"
    IRISH = "ga"
    ITALIAN = "it"
    JAPANESE = "ja"
    KOREAN = "ko"
    LATVIAN = "lv"
    LITHUANIAN = "lt"
    MACEDONIAN = "mk"
    MALAY = "ms"
    MALTESE = "mt"
    NORWEGIAN = "no"
    PERSIAN = "fa"
    POLISH = "pl"
    PORTUGUESE = "pt"
    ROMANIAN = "ro"
    RUSSIAN = "ru"
    SERBIAN = "sr"
    SLOVAK = "sk"
    SLOVENIAN = "sl"
    SPANISH = "es"
    SWAHILI = "sw"
    SWEDISH = "sv"
    TAGALOG = "tl"
    THAI = "th"
    TURKISH = "tr"
    UKRAINIAN = "uk"
    URDU = "ur"
    VIETNAMESE = "vi"
    WELSH = "cy"
    YIDDISH = "yi"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, value) -> "Language":
        """ISO 코드('ko') 또는 이름('Korean')을 받아 Language를 반환합니다.
        알 수 없는 값은 영어로 처리합니다."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.ENGLISH
        key = str(value).strip()
        try:
            return cls(key.lower())
        except ValueError:
            return cls.__members__.get(key.upper(), cls.ENGLISH)


def language_code(language: Optional[Language]) -> str:
    if language is None:
        return Language.ENGLISH.code
    return language.code


@dataclass(frozen=True)
class Metadata:
    title: str
    identifier: Identifier
    language: Optional[Language] = None
    creator: Optional[str] = None
    contributor: Optional[str] = None
    publisher: Optional[str] = None
    date: Optional[datetime.date] = None
    subject: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("책 제목이 비어 있습니다")
        if self.identifier is None:
            raise ValueError("식별자가 필요합니다")

    @property
    def language_code(self) -> str:
        return language_code(self.language)
