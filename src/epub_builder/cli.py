"""
epub-builder 명령행 인터페이스

    epub-builder build book.json -o book.epub --validate
    epub-builder validate book.epub --json
"""

import argparse
import json
import logging
import sys

from epub_builder import settings
from epub_builder.converter.creator import write_epub
from epub_builder.converter.validator import EpubValidator
from epub_builder.errors import EpubError
from epub_builder.loader import load_document_file

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="epub-builder", description="JSON 책 명세로 EPUB 2 파일을 생성합니다")
    parser.add_argument("-v", "--verbose", action="store_true", help="디버그 로그 출력")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="EPUB 파일 생성")
    build.add_argument("description", help="JSON 책 명세 파일 경로")
    build.add_argument("-o", "--output", required=True, help="생성할 .epub 파일 경로")
    build.add_argument("--validate", action="store_true", help="생성 후 구조 검증 수행")
    line_ending = build.add_mutually_exclusive_group()
    line_ending.add_argument("--lf", dest="line_ending", action="store_const", const="\n",
                             help="XML 줄바꿈을 LF로 지정")
    line_ending.add_argument("--crlf", dest="line_ending", action="store_const", const="\r\n",
                             help="XML 줄바꿈을 CRLF로 지정")

    validate = subparsers.add_parser("validate", help="EPUB 파일 구조 검증")
    validate.add_argument("epub", help="검증할 .epub 파일 경로")
    validate.add_argument("--json", action="store_true", help="검증 결과를 JSON으로 출력")

    return parser


def run_build(args):
    if args.line_ending is not None:
        settings.LINE_ENDING = args.line_ending

    document = load_document_file(args.description)
    output_path = write_epub(document, args.output)
    print(f"EPUB 생성 완료: {output_path}")

    if args.validate:
        result = EpubValidator(output_path).validate_all()
        if not result.is_valid:
            for error in result.errors:
                print(f"  [{error.category}] {error.entry or '-'}: {error.message}", file=sys.stderr)
            return 1
        print("구조 검증 통과")
    return 0


def run_validate(args):
    result = EpubValidator(args.epub).validate_all()
    if args.json:
        print(json.dumps(result.summary, ensure_ascii=False, indent=2))
    else:
        for issue in result.errors + result.warnings:
            print(f"[{issue.severity}] {issue.category} {issue.entry or '-'}: {issue.message}")
        print("검증 통과" if result.is_valid else f"검증 실패: {len(result.errors)}개의 오류")
    return 0 if result.is_valid else 1


def main(argv=None):
    """메인 함수 - 명령행 인터페이스"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
    )

    try:
        if args.command == "build":
            return run_build(args)
        return run_validate(args)
    except EpubError as e:
        print(f"오류: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
