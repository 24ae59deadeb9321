"""
NCX 내비게이션 맵(toc.ncx) 생성.

카운터 세 개를 사용합니다.
- play_order: 문서 전체에서 Content와 ContentReference마다 1씩 증가
- file_number: XHTML 인코더와 같은 규칙의 파일 번호 (navPoint가 같은 파일명을 가리켜야 함)
- link_number: Content 하나의 앵커 트리 안에서 전위 순서로 증가, id가 없는 앵커의 'idNN'에 사용
"""

import logging

from epub_builder.content import Counter, document_depth
from epub_builder.converter.files import NCX_PATH, FileContent
from epub_builder.converter.utils import format_xml, xml_escape

logger = logging.getLogger(__name__)


def toc_ncx(document):
    """toc.ncx 파일을 생성합니다.

    Args:
        document (Document): 인코딩할 문서

    Returns:
        FileContent: 'OEBPS/toc.ncx'
    """
    metadata = document.metadata
    depth = document_depth(document)

    parts = [f'''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE ncx PUBLIC "-//NISO//DTD ncx 2005-1//EN" "http://www.daisy.org/z3986/2005/ncx-2005-1.dtd">
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1"><head>
<meta name="dtb:uid" content="{xml_escape(metadata.identifier.urn)}"/>
<meta name="dtb:depth" content="{depth}"/>
<meta name="dtb:totalPageCount" content="0"/>
<meta name="dtb:maxPageNumber" content="0"/>
</head><docTitle><text>{xml_escape(metadata.title)}</text></docTitle><navMap>''']

    parts.append(contents_nav_points(document.contents, Counter(), Counter()))
    parts.append('</navMap></ncx>')

    logger.debug(f"toc.ncx 생성 완료 (dtb:depth={depth})")
    return FileContent.from_text(NCX_PATH, format_xml("".join(parts)))


def contents_nav_points(contents, play_order, file_number):
    """Content 목록을 navPoint로 변환합니다.

    각 Content의 navPoint 안에는 자신의 앵커 navPoint가 먼저, 하위 Content의 navPoint가 그 다음에 들어갑니다.
    """
    nav_points = []

    for content in contents:
        current_play_order = play_order.next()
        number = file_number.next()
        filename = content.resolve_filename(number)

        references = references_nav_points(
            number, filename, "", content.references, play_order, Counter()
        )
        children = contents_nav_points(content.children, play_order, file_number)

        nav_points.append(
            f'<navPoint id="navPoint-{number}" playOrder="{current_play_order}">'
            f'<navLabel><text>{xml_escape(str(content.reference_type))}</text></navLabel>'
            f'<content src="{xml_escape(filename)}"/>{references}{children}</navPoint>'
        )

    return "".join(nav_points)


def references_nav_points(number, filename, toc_path, references, play_order, link_number):
    """ContentReference 목록을 navPoint로 변환합니다.

    Args:
        number (int): 소유 Content의 파일 번호
        filename (str): 소유 Content의 파일명
        toc_path (str): 상위 앵커의 경로 ('' 또는 '-2-1' 형식)
        references: 변환할 ContentReference 목록
        play_order (Counter): 문서 전체 재생 순서
        link_number (Counter): 소유 Content 안의 앵커 번호

    Returns:
        str: navPoint 문자열. id는 'navPoint-{파일 번호}{경로}' (예: navPoint-1-2-1)
    """
    nav_points = []

    for index, reference in enumerate(references, 1):
        current_link = link_number.next()
        current_path = f"{toc_path}-{index}"
        current_play_order = play_order.next()

        children = references_nav_points(
            number, filename, current_path, reference.children, play_order, link_number
        )

        nav_points.append(
            f'<navPoint id="navPoint-{number}{current_path}" playOrder="{current_play_order}">'
            f'<navLabel><text>{xml_escape(reference.title)}</text></navLabel>'
            f'<content src="{xml_escape(reference.anchor_name(filename, current_link))}"/>{children}</navPoint>'
        )

    return "".join(nav_points)
