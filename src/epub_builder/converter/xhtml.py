import logging

from epub_builder.content import Content, Counter
from epub_builder.converter.files import FileContent, oebps_path
from epub_builder.converter.utils import format_xml, xml_escape

logger = logging.getLogger(__name__)

LINK_CSS = '<link href="style.css" rel="stylesheet" type="text/css"/>'


def stylesheet_link(document):
    """문서에 스타일시트가 있으면 <head>에 넣을 <link> 태그를, 없으면 빈 문자열을 반환합니다."""
    return LINK_CSS if document.stylesheet is not None else ""


def create_xhtml(title, stylesheet, body_text):
    """XHTML 1.1 섹션 문서를 생성합니다.

    Args:
        title (str): <title>에 들어갈 reference type 표시 이름
        stylesheet (str): <head>에 넣을 <link> 태그 또는 빈 문자열
        body_text (str): <body> 안에 그대로 들어갈 본문

    Returns:
        str: 들여쓰기가 적용된 XHTML 문자열
    """
    xml = f'''<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" "http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">
<html xmlns="http://www.w3.org/1999/xhtml"><head><title>{xml_escape(title)}</title>{stylesheet}</head><body>{body_text}</body></html>'''
    return format_xml(xml)


def create_file_contents(content: Content, counter: Counter, stylesheet=""):
    """Content와 하위 Content들을 전위 순회하며 XHTML 파일을 만듭니다.

    counter는 모든 루트 Content에 걸쳐 공유되므로 번호가 이어집니다.
    본문을 읽지 못하면 SourceReadError가 그대로 전파됩니다.

    Returns:
        list[FileContent]: 'OEBPS/{파일명}' 경로의 파일 목록 (순회 순서)
    """
    number = counter.next()
    filename = content.resolve_filename(number)
    text = content.body.to_text()

    logger.debug(f"XHTML 생성: {filename} ({content.reference_type})")
    file_contents = [
        FileContent.from_text(oebps_path(filename), create_xhtml(str(content.reference_type), stylesheet, text))
    ]

    for child in content.children:
        file_contents.extend(create_file_contents(child, counter, stylesheet))

    return file_contents


def create_section_files(document):
    """문서의 모든 루트 Content에 대해 XHTML 파일 목록을 반환합니다."""
    counter = Counter()
    stylesheet = stylesheet_link(document)
    file_contents = []
    for content in document.contents:
        file_contents.extend(create_file_contents(content, counter, stylesheet))
    return file_contents
