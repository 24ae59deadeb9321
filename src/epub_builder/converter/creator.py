"""
EPUB 컨테이너 조립.

기록 순서는 고정입니다.
1. mimetype (첫 번째 파일, 압축 없음)
2. META-INF/container.xml
3. META-INF/com.apple.ibooks.display-options.xml
4. OEBPS/style.css (있는 경우)
5. 표지 이미지
6. 리소스 (목록 순서)
7. XHTML 섹션 (전위 순회 순서)
8. OEBPS/content.opf
9. OEBPS/toc.ncx

어느 단계든 실패하면 전체 생성이 실패합니다. 이미 기록된 항목은 정리하지 않습니다.
"""

import logging
import os
import zipfile

from epub_builder.converter import files
from epub_builder.converter.ncx import toc_ncx
from epub_builder.converter.opf import content_opf
from epub_builder.converter.xhtml import create_section_files
from epub_builder.errors import ArchiveWriteError

logger = logging.getLogger(__name__)

# 같은 입력이면 같은 바이트가 나오도록 모든 항목에 고정 시각을 사용
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class ZipArchiveWriter:
    """ZIP 아카이브에 항목을 하나씩 순서대로 추가하는 writer"""

    def __init__(self, target):
        """
        Args:
            target: 출력 파일 경로 또는 쓰기 가능한 바이너리 파일 객체
        """
        try:
            self._zip = zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise ArchiveWriteError(str(target), e.strerror or str(e)) from e
        self.entries = []

    def write(self, path, data, compress=True):
        """항목 하나를 추가합니다. compress=False이면 압축 없이(stored) 저장합니다."""
        info = zipfile.ZipInfo(path, date_time=ZIP_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED if compress else zipfile.ZIP_STORED
        info.external_attr = 0o644 << 16
        try:
            self._zip.writestr(info, data)
        except (OSError, ValueError, RuntimeError) as e:
            raise ArchiveWriteError(path, str(e)) from e
        self.entries.append(path)

    def close(self):
        try:
            self._zip.close()
        except OSError as e:
            raise ArchiveWriteError("<central directory>", e.strerror or str(e)) from e

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            # 이미 실패한 경우 원래 예외를 유지
            try:
                self._zip.close()
            except (OSError, ValueError) as close_error:
                logger.warning(f"실패한 아카이브를 닫는 중 오류: {close_error}")
        return False


class Creator:
    """Document를 EPUB 아카이브 항목으로 기록합니다."""

    def __init__(self, document, writer):
        self.document = document
        self.writer = writer

    def create(self):
        document = self.document
        logger.info(f"EPUB 생성 시작: {document.metadata.title}")

        # --- 1~3. 고정 파일 ---
        self.add_file(files.mimetype(), compress=False)
        self.add_file(files.container())
        self.add_file(files.display_options())

        # --- 4. 스타일시트 ---
        if document.stylesheet is not None:
            self.add_file(files.FileContent(files.STYLESHEET_PATH, document.stylesheet.to_bytes()))

        # --- 5~6. 표지와 리소스 ---
        if document.cover_image is not None:
            self.add_file(resource_file_content(document.cover_image))

        for resource in document.resources:
            self.add_file(resource_file_content(resource))

        # --- 7. XHTML 섹션 ---
        for file_content in create_section_files(document):
            self.add_file(file_content)

        # --- 8~9. 패키지 문서와 내비게이션 ---
        self.add_file(content_opf(document))
        self.add_file(toc_ncx(document))

        logger.info(f"EPUB 생성 완료: {document.metadata.title}")

    def add_file(self, file_content, compress=True):
        logger.debug(f"  추가 중: {file_content.filepath}")
        self.writer.write(file_content.filepath, file_content.data, compress=compress)


def resource_file_content(resource):
    """리소스를 'OEBPS/{파일명}' 항목으로 변환합니다. 읽기 실패 시 SourceReadError."""
    return files.FileContent(files.oebps_path(resource.filename), resource.read_bytes())


def create_epub(document, target):
    """EPUB을 target(경로 또는 바이너리 파일 객체)에 기록합니다.

    실패 시 예외를 그대로 전파하며 부분적으로 기록된 출력은 정리하지 않습니다.
    """
    with ZipArchiveWriter(target) as writer:
        Creator(document, writer).create()


def write_epub(document, output_path):
    """EPUB 파일을 생성합니다. 실패하면 부분적으로 기록된 파일을 삭제하고 예외를 다시 발생시킵니다.

    Args:
        document (Document): 인코딩할 문서
        output_path (str): 생성할 .epub 파일 경로

    Returns:
        str: 생성된 EPUB 파일 경로
    """
    output_path = os.fspath(output_path)
    try:
        create_epub(document, output_path)
    except Exception:
        logger.error(f"EPUB 생성 실패, 부분 출력 삭제: {output_path}")
        if os.path.isfile(output_path):
            os.remove(output_path)
        raise
    return output_path
