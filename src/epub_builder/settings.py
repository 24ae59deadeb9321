"""
epub_builder 설정 모듈 - 환경 변수에서 설정값을 읽습니다.
"""

import os


def _line_ending(value):
    """EPUB_BUILDER_LINE_ENDING 값을 실제 줄바꿈 문자열로 변환합니다."""
    if value is None:
        # 플랫폼 관례를 따름 (Windows: CRLF, 그 외: LF)
        return "\r\n" if os.name == "nt" else "\n"
    value = value.strip().lower()
    if value == "crlf":
        return "\r\n"
    if value == "lf":
        return "\n"
    raise ValueError(f"EPUB_BUILDER_LINE_ENDING 값은 'lf' 또는 'crlf'여야 합니다: {value}")


# XML 포맷팅 설정
LINE_ENDING = _line_ending(os.environ.get('EPUB_BUILDER_LINE_ENDING'))
XML_INDENT = int(os.environ.get('EPUB_BUILDER_XML_INDENT', 2))

# 로깅 설정
LOG_LEVEL = os.environ.get('EPUB_BUILDER_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# API 서버 설정
API_HOST = os.environ.get('EPUB_BUILDER_API_HOST', '0.0.0.0')
API_PORT = int(os.environ.get('EPUB_BUILDER_API_PORT', 8000))
MAX_UPLOAD_MB = int(os.environ.get('EPUB_BUILDER_MAX_UPLOAD_MB', 50))
