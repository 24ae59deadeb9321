import logging
import posixpath
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from lxml import etree

from epub_builder.converter.files import MIMETYPE

logger = logging.getLogger(__name__)

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
NCX_NS = "http://www.daisy.org/z3986/2005/ncx/"
CONTAINER_PATH = "META-INF/container.xml"

# 외부 DTD를 내려받지 않도록 설정된 파서
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)


class ValidationIssue:
    """아카이브 항목 하나에 대한 검증 문제"""
    def __init__(self, category: str, message: str, entry: Optional[str] = None,
                 details: Optional[Dict] = None, severity: str = "error"):
        self.category = category
        self.message = message
        self.entry = entry  # 문제가 발견된 아카이브 항목 (예: 'OEBPS/toc.ncx'), 아카이브 전체면 None
        self.details = details or {}
        self.severity = severity

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "entry": self.entry, "message": self.message, "details": self.details}


class ValidationResult:
    """EPUB 아카이브 검증 결과. 오류가 하나라도 있으면 is_valid가 False가 됩니다."""
    def __init__(self):
        self.is_valid = True
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []
        self.summary: Dict[str, Any] = {}

    def add_error(self, category: str, message: str, entry: Optional[str] = None, details: Optional[Dict] = None):
        self.errors.append(ValidationIssue(category, message, entry, details, "error"))
        self.is_valid = False
        logger.error(f"[검증 오류] {entry or '-'} {category}: {message}")

    def add_warning(self, category: str, message: str, entry: Optional[str] = None, details: Optional[Dict] = None):
        self.warnings.append(ValidationIssue(category, message, entry, details, "warning"))
        logger.warning(f"[검증 경고] {entry or '-'} {category}: {message}")

    def entries_with_errors(self) -> List[str]:
        """오류가 발견된 아카이브 항목 목록 (중복 제거, 발견 순서)"""
        return list(dict.fromkeys(issue.entry for issue in self.errors if issue.entry))

    def get_summary(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "invalid_entries": self.entries_with_errors(),
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


class EpubValidator:
    """생성된 EPUB 아카이브의 구조 검증기.

    외부 EPUB 검증기를 대신하지 않으며, 이 패키지가 보장하는 컨테이너 규칙
    (mimetype 위치/압축, 제어 문서 형식, manifest/spine/NCX 상호 참조)만 확인합니다.
    """

    def __init__(self, epub_path):
        self.epub_path = Path(epub_path)
        self.result = ValidationResult()

        # 필수 파일 목록
        self.required_files = [
            "mimetype",
            CONTAINER_PATH,
        ]

    def validate_all(self) -> ValidationResult:
        """모든 검증을 수행"""
        logger.info(f"EPUB 검증 시작: {self.epub_path}")

        try:
            with zipfile.ZipFile(self.epub_path) as archive:
                # 1. 컨테이너 구조 검증
                self.validate_mimetype(archive)
                self.validate_file_structure(archive)

                # 2. 패키지 문서 검증
                opf_path = self.validate_container(archive)
                if opf_path is not None:
                    self.validate_package(archive, opf_path)
        except zipfile.BadZipFile as e:
            self.result.add_error("container", f"ZIP 아카이브가 아닙니다: {str(e)}")
        except OSError as e:
            self.result.add_error("container", f"파일을 열 수 없습니다: {str(e)}")

        self.result.summary = self.result.get_summary()

        if self.result.is_valid:
            logger.info("EPUB 검증 완료: 모든 검증을 통과했습니다.")
        else:
            logger.error(f"EPUB 검증 실패: {len(self.result.errors)}개의 오류 발견")

        return self.result

    def validate_mimetype(self, archive: zipfile.ZipFile):
        """mimetype이 첫 번째 항목이고 압축되지 않았는지 확인"""
        infos = archive.infolist()
        if not infos or infos[0].filename != "mimetype":
            self.result.add_error("container", "mimetype이 첫 번째 항목이 아닙니다", entry="mimetype")
            return

        info = infos[0]
        if info.compress_type != zipfile.ZIP_STORED:
            self.result.add_error("container", "mimetype이 압축되어 있습니다", entry="mimetype")
        if archive.read(info) != MIMETYPE.encode("ascii"):
            self.result.add_error("container", f"mimetype 내용이 '{MIMETYPE}'가 아닙니다", entry="mimetype")

    def validate_file_structure(self, archive: zipfile.ZipFile):
        """파일 구조 검증"""
        names = set(archive.namelist())
        for filename in self.required_files:
            if filename not in names:
                self.result.add_error("file_structure", f"필수 파일이 없습니다: {filename}", entry=filename)

    def validate_container(self, archive: zipfile.ZipFile) -> Optional[str]:
        """container.xml에서 패키지 문서 경로를 찾아 반환"""
        root = self._parse(archive, CONTAINER_PATH)
        if root is None:
            return None

        rootfile = root.find(f"{{{CONTAINER_NS}}}rootfiles/{{{CONTAINER_NS}}}rootfile")
        if rootfile is None or not rootfile.get("full-path"):
            self.result.add_error("xml_schema", "container.xml에 rootfile이 없습니다", entry=CONTAINER_PATH)
            return None

        opf_path = rootfile.get("full-path")
        if opf_path not in archive.namelist():
            self.result.add_error("file_structure", f"container.xml이 가리키는 패키지 문서가 없습니다: {opf_path}", entry=CONTAINER_PATH)
            return None
        return opf_path

    def validate_package(self, archive: zipfile.ZipFile, opf_path: str):
        """OPF manifest/spine/guide와 NCX 검증"""
        root = self._parse(archive, opf_path)
        if root is None:
            return

        base_dir = posixpath.dirname(opf_path)
        names = set(archive.namelist())

        metadata = root.find(f"{{{OPF_NS}}}metadata")
        manifest = root.find(f"{{{OPF_NS}}}manifest")
        spine = root.find(f"{{{OPF_NS}}}spine")

        if metadata is None:
            self.result.add_error("xml_schema", "OPF XML에 metadata 요소가 없습니다", entry=opf_path)
        else:
            for tag in ("title", "language", "identifier"):
                if metadata.find(f"{{{DC_NS}}}{tag}") is None:
                    self.result.add_error("metadata", f"필수 메타데이터가 없습니다: dc:{tag}", entry=opf_path)
        if manifest is None:
            self.result.add_error("xml_schema", "OPF XML에 manifest 요소가 없습니다", entry=opf_path)
            return
        if spine is None:
            self.result.add_error("xml_schema", "OPF XML에 spine 요소가 없습니다", entry=opf_path)
            return

        # manifest 항목 존재 확인
        items = {}
        for item in manifest.findall(f"{{{OPF_NS}}}item"):
            item_id = item.get("id")
            href = item.get("href")
            if item_id in items:
                self.result.add_error("manifest", f"manifest id가 중복됩니다: {item_id}", entry=opf_path)
            items[item_id] = item
            full_path = posixpath.join(base_dir, href) if href else None
            if full_path not in names:
                self.result.add_error("manifest", f"manifest가 참조하는 파일이 없습니다: {href}", entry=full_path or opf_path)
            elif item.get("media-type") == "application/xhtml+xml":
                self._parse(archive, full_path, severity="warning")

        # spine 참조 확인
        for itemref in spine.findall(f"{{{OPF_NS}}}itemref"):
            idref = itemref.get("idref")
            if idref not in items:
                self.result.add_error("spine", f"spine이 manifest에 없는 항목을 참조합니다: {idref}", entry=opf_path)

        hrefs = {item.get("href") for item in items.values()}
        guide = root.find(f"{{{OPF_NS}}}guide")
        if guide is not None:
            for reference in guide.findall(f"{{{OPF_NS}}}reference"):
                if reference.get("href", "").split("#")[0] not in hrefs:
                    self.result.add_error("guide", f"guide가 manifest에 없는 파일을 참조합니다: {reference.get('href')}", entry=opf_path)

        toc_id = spine.get("toc")
        if toc_id not in items:
            self.result.add_error("spine", f"spine toc 속성이 manifest에 없습니다: {toc_id}", entry=opf_path)
            return
        self.validate_ncx(archive, posixpath.join(base_dir, items[toc_id].get("href")), hrefs)

    def validate_ncx(self, archive: zipfile.ZipFile, ncx_path: str, hrefs):
        """NCX navPoint의 참조, id 중복, playOrder 순서 확인"""
        root = self._parse(archive, ncx_path)
        if root is None:
            return

        nav_map = root.find(f"{{{NCX_NS}}}navMap")
        if nav_map is None:
            self.result.add_error("xml_schema", "NCX XML에 navMap 요소가 없습니다", entry=ncx_path)
            return

        seen_ids = set()
        expected_order = 1
        for nav_point in nav_map.iter(f"{{{NCX_NS}}}navPoint"):
            nav_id = nav_point.get("id")
            if nav_id in seen_ids:
                self.result.add_error("ncx", f"navPoint id가 중복됩니다: {nav_id}", entry=ncx_path)
            seen_ids.add(nav_id)

            play_order = nav_point.get("playOrder")
            if play_order != str(expected_order):
                self.result.add_error(
                    "ncx",
                    f"playOrder가 문서 순서와 다릅니다: {nav_id}",
                    entry=ncx_path,
                    details={"expected": expected_order, "actual": play_order},
                )
            expected_order += 1

            content = nav_point.find(f"{{{NCX_NS}}}content")
            src = content.get("src", "") if content is not None else ""
            if src.split("#")[0] not in hrefs:
                self.result.add_error("ncx", f"navPoint가 manifest에 없는 파일을 참조합니다: {src}", entry=ncx_path)

    def _parse(self, archive: zipfile.ZipFile, name: str, severity: str = "error"):
        """아카이브 항목을 XML로 파싱. 실패 시 severity에 따라 오류/경고를 기록하고 None 반환"""
        report = self.result.add_error if severity == "error" else self.result.add_warning
        try:
            return etree.fromstring(archive.read(name), _PARSER)
        except KeyError:
            report("file_structure", f"파일이 없습니다: {name}", entry=name)
        except etree.XMLSyntaxError as e:
            report("xml_schema", f"XML 구문 오류: {str(e)}", entry=name)
        return None
