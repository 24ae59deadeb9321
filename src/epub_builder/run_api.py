#!/usr/bin/env python
"""
EPUB Builder API 실행 스크립트
"""

import argparse
import logging

import uvicorn

from epub_builder import settings

logger = logging.getLogger(__name__)


def main():
    """API 서버를 실행합니다."""
    parser = argparse.ArgumentParser(description='EPUB Builder API 서버')
    parser.add_argument('--host', type=str, default=settings.API_HOST, help='API 서버 호스트')
    parser.add_argument('--port', type=int, default=settings.API_PORT, help='API 서버 포트')
    parser.add_argument('--log-level', type=str, default=settings.LOG_LEVEL, help='로그 레벨')

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=settings.LOG_FORMAT)

    logger.info(f"EPUB Builder API 서버 시작: {args.host}:{args.port}")
    uvicorn.run("epub_builder.api:app", host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
