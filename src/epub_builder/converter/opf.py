"""
OPF 패키지 문서(content.opf) 생성 - metadata, manifest, spine, guide.

manifest/spine/guide의 Content 항목은 각각 새 카운터로 같은 전위 순회를 다시 수행합니다.
XHTML 인코더(converter/xhtml.py)와 같은 규칙이므로 세 구간 모두 같은 파일명을 얻습니다.
"""

import logging

from epub_builder.content import XHTML_EXTENSION, Counter, walk_contents
from epub_builder.converter.files import PACKAGE_PATH, FileContent
from epub_builder.converter.utils import format_xml, xml_escape
from epub_builder.errors import InvalidFilenameError

logger = logging.getLogger(__name__)


def content_opf(document):
    """content.opf 파일을 생성합니다.

    Args:
        document (Document): 인코딩할 문서

    Returns:
        FileContent: 'OEBPS/content.opf'

    Raises:
        InvalidFilenameError: Content 파일명이 '.xhtml'로 끝나지 않는 경우
    """
    metadata = document.metadata
    parts = ['''<?xml version="1.0" encoding="utf-8"?>
<package version="2.0" unique-identifier="BookId" xmlns="http://www.idpf.org/2007/opf">
<metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">''']

    # --- 1. metadata ---
    parts.append(f'<dc:title>{xml_escape(metadata.title)}</dc:title>')
    parts.append(f'<dc:language>{metadata.language_code}</dc:language>')
    parts.append(
        f'<dc:identifier id="BookId" opf:scheme="{metadata.identifier.label}">'
        f'{xml_escape(metadata.identifier.urn)}</dc:identifier>'
    )

    # 값이 있는 선택 항목만 출력 (빈 요소는 만들지 않음)
    if metadata.creator is not None:
        parts.append(f'<dc:creator opf:role="aut">{xml_escape(metadata.creator)}</dc:creator>')
    if metadata.contributor is not None:
        parts.append(f'<dc:contributor opf:role="trl">{xml_escape(metadata.contributor)}</dc:contributor>')
    if metadata.publisher is not None:
        parts.append(f'<dc:publisher>{xml_escape(metadata.publisher)}</dc:publisher>')
    if metadata.date is not None:
        parts.append(f'<dc:date opf:event="publication">{metadata.date.strftime("%Y-%m-%d")}</dc:date>')
    if metadata.subject is not None:
        parts.append(f'<dc:subject>{xml_escape(metadata.subject)}</dc:subject>')
    if metadata.description is not None:
        parts.append(f'<dc:description>{xml_escape(metadata.description)}</dc:description>')
    if document.cover_image is not None:
        parts.append(f'<meta name="cover" content="{xml_escape(document.cover_image.filename)}"/>')

    # --- 2. manifest ---
    parts.append('</metadata><manifest><item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>')

    if document.stylesheet is not None:
        parts.append('<item id="style.css" href="style.css" media-type="text/css"/>')

    if document.cover_image is not None:
        parts.append(resource_manifest_item(document.cover_image))

    for resource in document.resources:
        parts.append(resource_manifest_item(resource))

    parts.extend(
        f'<item id="{filename}" href="{filename}" media-type="application/xhtml+xml"/>'
        for filename, _ in content_chain(document.contents)
    )

    # --- 3. spine ---
    parts.append('</manifest><spine toc="ncx">')
    parts.extend(
        f'<itemref idref="{filename}"/>'
        for filename, _ in content_chain(document.contents)
    )

    # --- 4. guide ---
    parts.append('</spine><guide>')
    parts.extend(
        f'<reference type="{content.reference_type.type}" '
        f'title="{xml_escape(str(content.reference_type))}" href="{filename}"/>'
        for filename, content in content_chain(document.contents)
    )

    parts.append('</guide></package>')

    logger.debug("content.opf 생성 완료")
    return FileContent.from_text(PACKAGE_PATH, format_xml("".join(parts)))


def content_chain(contents):
    """새 카운터로 Content 트리를 순회하며 (파일명, Content)를 생성합니다.

    Raises:
        InvalidFilenameError: 파일명이 '.xhtml'로 끝나지 않는 경우
    """
    for _, filename, content in walk_contents(contents, Counter()):
        if not filename.endswith(XHTML_EXTENSION):
            logger.error(f"잘못된 Content 파일명: {filename}")
            raise InvalidFilenameError(filename)
        yield xml_escape(filename), content


def resource_manifest_item(resource):
    filename = xml_escape(resource.filename)
    return f'<item id="{filename}" href="{filename}" media-type="{resource.media_type}"/>'
