"""아카이브에 기록될 파일 단위와 고정 파일들 (mimetype, container.xml, display options)"""

from dataclasses import dataclass

MIMETYPE = "application/epub+zip"
OEBPS_DIR = "OEBPS"
PACKAGE_PATH = f"{OEBPS_DIR}/content.opf"
NCX_PATH = f"{OEBPS_DIR}/toc.ncx"
STYLESHEET_PATH = f"{OEBPS_DIR}/style.css"


@dataclass(frozen=True)
class FileContent:
    """아카이브 내부 경로와 바이트"""
    filepath: str
    data: bytes

    @classmethod
    def from_text(cls, filepath, text):
        return cls(filepath, text.encode("utf-8"))

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


def oebps_path(filename):
    return f"{OEBPS_DIR}/{filename}"


def mimetype():
    return FileContent("mimetype", MIMETYPE.encode("ascii"))


def container():
    return FileContent.from_text("META-INF/container.xml", f'''<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
    <rootfiles>
        <rootfile full-path="{PACKAGE_PATH}" media-type="application/oebps-package+xml"/>
    </rootfiles>
</container>
''')


def display_options():
    return FileContent.from_text("META-INF/com.apple.ibooks.display-options.xml", '''<?xml version="1.0" encoding="utf-8"?>
<display_options>
    <platform name="*">
        <option name="specified-fonts">true</option>
    </platform>
</display_options>
''')
