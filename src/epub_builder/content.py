"""
콘텐츠 트리 모델 - 섹션(Content)과 앵커(ContentReference)의 재귀 구조,
그리고 파일명/깊이 계산.

모든 인코더(XHTML, OPF, NCX)는 같은 전위 순회(pre-order)와 같은 번호 규칙으로
파일명을 다시 계산합니다. 순회 순서나 번호 규칙이 어긋나면 manifest, spine,
navMap이 서로 다른 파일을 가리키게 되므로 규칙은 이 모듈에만 둡니다.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from epub_builder.body import Body
from epub_builder.metadata import Metadata
from epub_builder.reftype import ReferenceType
from epub_builder.resource import Resource

XHTML_EXTENSION = ".xhtml"


class Counter:
    """재귀 순회에 전달되는 번호 상태. next()는 증가 후 값을 반환합니다 (첫 값 1)."""

    def __init__(self, start=0):
        self.value = start

    def next(self) -> int:
        self.value += 1
        return self.value

    def __repr__(self):
        return f"Counter({self.value})"


@dataclass(frozen=True)
class ContentReference:
    """섹션 내부 앵커 (NCX에서 하위 navPoint가 됨)"""
    title: str
    children: Tuple["ContentReference", ...] = ()
    id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))

    def anchor_name(self, xhtml: str, link_number: int) -> str:
        """'{xhtml}#{id}' 또는 id가 없으면 '{xhtml}#id{NN}'"""
        if self.id is not None:
            return f"{xhtml}#{self.id}"
        return f"{xhtml}#id{link_number:02d}"


@dataclass(frozen=True)
class Content:
    """하나의 XHTML 파일로 출력되는 섹션"""
    body: Body
    reference_type: ReferenceType
    references: Tuple[ContentReference, ...] = ()
    children: Tuple["Content", ...] = ()
    filename: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "references", tuple(self.references))
        object.__setattr__(self, "children", tuple(self.children))

    def resolve_filename(self, number: int) -> str:
        return resolved_filename(self, number)


@dataclass(frozen=True)
class Document:
    """인코딩 파이프라인의 유일한 입력"""
    metadata: Metadata
    stylesheet: Optional[Body] = None
    cover_image: Optional[Resource] = None
    resources: Tuple[Resource, ...] = ()
    contents: Tuple[Content, ...] = ()

    def __post_init__(self):
        if self.cover_image is not None and not self.cover_image.is_image:
            raise ValueError(f"표지는 이미지 리소스여야 합니다: {self.cover_image.path}")
        object.__setattr__(self, "resources", tuple(self.resources))
        object.__setattr__(self, "contents", tuple(self.contents))


def resolved_filename(content: Content, number: int) -> str:
    if content.filename is not None:
        return content.filename
    return f"c{number:02d}{XHTML_EXTENSION}"


# 깊이 계산은 첫 번째 자식만 따라갑니다 (형제는 비교하지 않음).
# NCX dtb:depth 값이 이 규칙으로 계산되므로 그대로 유지합니다.

def structural_depth(content: Content) -> int:
    if not content.children:
        return 0
    return 1 + structural_depth(content.children[0])


def reference_depth(reference: ContentReference) -> int:
    if not reference.children:
        return 0
    return 1 + reference_depth(reference.children[0])


def combined_depth(content: Content) -> int:
    """하위 섹션 경로와 앵커 경로 중 더 깊은 쪽"""
    references_level = 0
    if content.references:
        references_level = 1 + reference_depth(content.references[0])

    children_level = 0
    if content.children:
        children_level = 1 + combined_depth(content.children[0])

    return max(references_level, children_level)


def document_depth(document: Document) -> int:
    if not document.contents:
        return 0

    max_sub = 1
    max_ref = 1
    for content in document.contents:
        max_sub = max(max_sub, structural_depth(content) + 1)
        max_ref = max(max_ref, combined_depth(content) + 1)

    return max(max_sub, max_ref)


def walk_contents(contents, counter: Counter) -> Iterator[Tuple[int, str, Content]]:
    """전위 순회로 (번호, 파일명, Content)를 생성합니다.

    Args:
        contents: 순회할 Content 목록
        counter: 이 순회에서 사용할 번호 상태 (호출자가 새로 만들어 전달)
    """
    for content in contents:
        number = counter.next()
        yield number, content.resolve_filename(number), content
        yield from walk_contents(content.children, counter)
