import html
import logging
import re

from epub_builder import settings

logger = logging.getLogger(__name__)

# 컴파일된 정규식 패턴들
INTER_TAG_WHITESPACE_PATTERN = re.compile(r'>\s+<')
TAG_PATTERN = re.compile(r'(<[^>]+>)')


def xml_escape(text):
    """XML 텍스트/속성 값에 들어갈 문자열의 특수 문자를 이스케이프합니다.

    Args:
        text (str): 이스케이프할 텍스트

    Returns:
        str: 이스케이프된 텍스트
    """
    if not isinstance(text, str):
        text = str(text)
    return html.escape(text, quote=True)


def format_xml(xml, newline=None, indent=None):
    """XML 문자열의 들여쓰기를 다시 맞춥니다.

    파서를 쓰지 않는 텍스트 변환입니다. 태그 사이의 공백만 있는 구간을 없앤 뒤
    태그 종류별로 줄바꿈과 들여쓰기를 넣습니다.

    - XML 선언(<?...?>): 그대로 출력, 깊이 변화 없음
    - 빈 요소(.../>), <!...>: 줄바꿈 + 들여쓰기, 깊이 변화 없음
    - 닫는 태그: 깊이 감소 후, 바로 앞 태그가 여는 태그가 아니면 줄바꿈 + 들여쓰기
      (<title>text</title> 같은 말단 요소는 한 줄로 유지)
    - 여는 태그: 줄바꿈 + 현재 깊이 들여쓰기 후 깊이 증가

    속성 값 안의 '>' 문자와 well-formedness 검사는 지원하지 않습니다.

    Args:
        xml (str): 원본 XML 문자열
        newline (str, optional): 줄바꿈 문자열. 기본값은 settings.LINE_ENDING
        indent (int, optional): 들여쓰기 공백 수. 기본값은 settings.XML_INDENT

    Returns:
        str: 들여쓰기가 적용된 XML 문자열
    """
    if newline is None:
        newline = settings.LINE_ENDING
    if indent is None:
        indent = settings.XML_INDENT
    pad = " " * indent

    collapsed = INTER_TAG_WHITESPACE_PATTERN.sub('><', xml.strip())

    parts = []
    depth = 0
    last_tag = None  # "open", "close", "empty", "decl"
    last_was_text = False

    def line_break(level):
        # 줄바꿈 직전 텍스트의 끝 공백은 제거 (두 번 적용해도 결과가 같도록)
        if last_was_text:
            parts[-1] = parts[-1].rstrip()
            if not parts[-1]:
                parts.pop()
        if parts:
            parts.append(newline)
        parts.append(pad * level)

    for token in TAG_PATTERN.split(collapsed):
        if not token:
            continue

        if not TAG_PATTERN.fullmatch(token):
            parts.append(token)
            last_was_text = True
            continue

        if token.startswith("<?"):
            parts.append(token)
            last_tag = "decl"
        elif token.startswith("</"):
            depth = max(depth - 1, 0)
            if last_tag != "open":
                line_break(depth)
            parts.append(token)
            last_tag = "close"
        elif token.endswith("/>") or token.startswith("<!"):
            line_break(depth)
            parts.append(token)
            last_tag = "empty"
        else:
            line_break(depth)
            parts.append(token)
            depth += 1
            last_tag = "open"
        last_was_text = False

    return "".join(parts)
