"""섹션의 의미 유형 (guide reference type)"""

from dataclasses import dataclass
from enum import Enum


class RefKind(Enum):
    """값은 guide 섹션과 epub type 속성에 쓰이는 고정 태그"""
    ACKNOWLEDGEMENTS = "acknowledgements"
    BIBLIOGRAPHY = "bibliography"
    COLOPHON = "colophon"
    COPYRIGHT = "copyright-page"
    COVER = "cover"
    DEDICATION = "dedication"
    EPIGRAPH = "epigraph"
    FOREWORD = "foreword"
    GLOSSARY = "glossary"
    INDEX = "index"
    LOI = "loi"
    LOT = "lot"
    NOTES = "notes"
    PREFACE = "preface"
    TEXT = "text"
    TITLE_PAGE = "title-page"
    TOC = "toc"

    @classmethod
    def from_name(cls, name: str) -> "RefKind":
        """'title-page', 'title_page', 'TITLE_PAGE' 형식을 모두 허용합니다."""
        key = name.strip()
        for kind in cls:
            if key.lower().replace("_", "-") == kind.value or key.upper().replace("-", "_") == kind.name:
                return kind
        raise ValueError(f"알 수 없는 reference type입니다: {name}")


@dataclass(frozen=True)
class ReferenceType:
    kind: RefKind
    label: str

    @property
    def type(self) -> str:
        return self.kind.value

    def __str__(self):
        return self.label

    @classmethod
    def acknowledgements(cls, label): return cls(RefKind.ACKNOWLEDGEMENTS, label)

    @classmethod
    def bibliography(cls, label): return cls(RefKind.BIBLIOGRAPHY, label)

    @classmethod
    def colophon(cls, label): return cls(RefKind.COLOPHON, label)

    @classmethod
    def copyright(cls, label): return cls(RefKind.COPYRIGHT, label)

    @classmethod
    def cover(cls, label): return cls(RefKind.COVER, label)

    @classmethod
    def dedication(cls, label): return cls(RefKind.DEDICATION, label)

    @classmethod
    def epigraph(cls, label): return cls(RefKind.EPIGRAPH, label)

    @classmethod
    def foreword(cls, label): return cls(RefKind.FOREWORD, label)

    @classmethod
    def glossary(cls, label): return cls(RefKind.GLOSSARY, label)

    @classmethod
    def index(cls, label): return cls(RefKind.INDEX, label)

    @classmethod
    def loi(cls, label): return cls(RefKind.LOI, label)

    @classmethod
    def lot(cls, label): return cls(RefKind.LOT, label)

    @classmethod
    def notes(cls, label): return cls(RefKind.NOTES, label)

    @classmethod
    def preface(cls, label): return cls(RefKind.PREFACE, label)

    @classmethod
    def text(cls, label): return cls(RefKind.TEXT, label)

    @classmethod
    def title_page(cls, label): return cls(RefKind.TITLE_PAGE, label)

    @classmethod
    def toc(cls, label): return cls(RefKind.TOC, label)
