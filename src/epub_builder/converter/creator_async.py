"""
비동기 EPUB 생성.

파일 기반 Body/Resource 읽기는 스레드에서 동시에 수행하고, 아카이브 기록은
동기 Creator를 워커 스레드 하나에서 실행하여 순서를 그대로 유지합니다.
"""

import asyncio
import dataclasses
import logging
import os

from epub_builder.body import FileBody, RawBody
from epub_builder.converter.creator import create_epub

logger = logging.getLogger(__name__)


async def _read_body(body):
    if isinstance(body, FileBody):
        return RawBody(await asyncio.to_thread(body.to_bytes))
    return body


async def _read_resource(resource):
    if resource.data is not None:
        return resource
    data = await asyncio.to_thread(resource.read_bytes)
    return dataclasses.replace(resource, data=data)


async def _read_content(content):
    body, children = await asyncio.gather(
        _read_body(content.body),
        asyncio.gather(*(_read_content(child) for child in content.children)),
    )
    return dataclasses.replace(content, body=body, children=tuple(children))


async def load_document(document):
    """모든 파일 기반 원본을 동시에 읽어 메모리 원본만 가진 Document 사본을 반환합니다.

    하나라도 읽기에 실패하면 SourceReadError가 전파됩니다.
    """
    stylesheet, cover_image, resources, contents = await asyncio.gather(
        _read_body(document.stylesheet) if document.stylesheet is not None else _none(),
        _read_resource(document.cover_image) if document.cover_image is not None else _none(),
        asyncio.gather(*(_read_resource(resource) for resource in document.resources)),
        asyncio.gather(*(_read_content(content) for content in document.contents)),
    )
    return dataclasses.replace(
        document,
        stylesheet=stylesheet,
        cover_image=cover_image,
        resources=tuple(resources),
        contents=tuple(contents),
    )


async def _none():
    return None


async def create_epub_async(document, target):
    """create_epub의 비동기 버전. 항목 기록 순서는 동기 버전과 같습니다."""
    loaded = await load_document(document)
    logger.debug("원본 읽기 완료, 아카이브 기록 시작")
    await asyncio.to_thread(create_epub, loaded, target)


async def write_epub_async(document, output_path):
    """write_epub의 비동기 버전. 실패하면 부분 출력 파일을 삭제합니다."""
    output_path = os.fspath(output_path)
    try:
        await create_epub_async(document, output_path)
    except BaseException:
        logger.error(f"EPUB 생성 실패, 부분 출력 삭제: {output_path}")
        if os.path.isfile(output_path):
            os.remove(output_path)
        raise
    return output_path
