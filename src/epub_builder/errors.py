"""EPUB 생성 파이프라인의 예외 클래스"""


class EpubError(Exception):
    """EPUB 생성 중 발생하는 모든 오류의 기본 클래스"""


class SourceReadError(EpubError):
    """Body 또는 Resource의 바이트를 읽을 수 없음"""

    def __init__(self, source, reason=None):
        self.source = str(source)
        self.reason = reason
        message = f"원본을 읽을 수 없습니다: {self.source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidFilenameError(EpubError):
    """Content 파일명이 '.xhtml'로 끝나지 않음"""

    def __init__(self, filename):
        self.filename = filename
        super().__init__(f"content filename must end with '.xhtml'. Got '{filename}'")


class ArchiveWriteError(EpubError):
    """아카이브 항목 생성 또는 쓰기 실패"""

    def __init__(self, entry, reason=None):
        self.entry = entry
        self.reason = reason
        message = f"아카이브 항목을 쓸 수 없습니다: {entry}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class BookDescriptionError(EpubError):
    """JSON 책 명세가 올바르지 않음"""
