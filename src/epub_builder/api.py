import io
import logging
import re
import tempfile
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from epub_builder import settings
from epub_builder.converter.creator_async import create_epub_async
from epub_builder.converter.validator import EpubValidator
from epub_builder.errors import BookDescriptionError, EpubError
from epub_builder.loader import load_document
from epub_builder.models import BookDescription

logger = logging.getLogger(__name__)

EPUB_MEDIA_TYPE = "application/epub+zip"
UNSAFE_FILENAME_PATTERN = re.compile(r'[^A-Za-z0-9._-]+')
UPLOAD_CHUNK_SIZE = 1024 * 1024

app = FastAPI(
    title="EPUB Builder API",
    description="JSON 책 명세로 EPUB 2 파일을 생성하고 검증하는 API",
    version="0.1.0"
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def epub_filename(title):
    """제목으로 다운로드 파일명을 만듭니다."""
    stem = UNSAFE_FILENAME_PATTERN.sub('_', title).strip('_.') or "book"
    return f"{stem}.epub"


@app.post("/epub")
async def create_epub_endpoint(description: BookDescription):
    """
    JSON 책 명세로 EPUB 파일을 생성하여 반환합니다.

    본문은 'text', 리소스는 base64 'data'로 전달해야 하며 서버 파일 경로('path')는 허용되지 않습니다.
    명세 형식 오류는 FastAPI가 422로 응답합니다.
    """
    try:
        document = load_document(description, allow_paths=False)
    except BookDescriptionError as e:
        logger.error(f"잘못된 책 명세: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"EPUB 생성 요청: 제목={document.metadata.title}, 루트 섹션={len(document.contents)}개")

    buffer = io.BytesIO()
    try:
        await create_epub_async(document, buffer)
    except EpubError as e:
        logger.error(f"EPUB 생성 실패: {str(e)}")
        raise HTTPException(status_code=422, detail=str(e))

    filename = epub_filename(document.metadata.title)
    return Response(
        content=buffer.getvalue(),
        media_type=EPUB_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/validate")
async def validate_epub_endpoint(file: UploadFile = File(...)):
    """
    업로드된 EPUB 파일의 구조를 검증하고 결과 요약을 반환합니다.
    """
    logger.info(f"검증 요청 받음: 파일명={file.filename}")

    if not file.filename or not file.filename.lower().endswith('.epub'):
        raise HTTPException(status_code=400, detail="EPUB 파일만 업로드 가능합니다.")

    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    with tempfile.TemporaryDirectory(prefix="epub_builder_") as temp_dir:
        temp_path = Path(temp_dir) / "upload.epub"
        received = 0
        with open(temp_path, "wb") as buffer:
            # 제한을 넘는 순간 복사를 중단
            while chunk := await file.read(UPLOAD_CHUNK_SIZE):
                received += len(chunk)
                if received > max_bytes:
                    logger.warning(f"업로드 크기 제한 초과: {file.filename}")
                    raise HTTPException(status_code=413, detail=f"파일 크기가 {settings.MAX_UPLOAD_MB}MB를 초과합니다.")
                buffer.write(chunk)

        result = await run_in_threadpool(EpubValidator(temp_path).validate_all)

    return {"filename": file.filename, **result.summary}


@app.get("/")
async def root():
    """API 루트 경로"""
    return {
        "message": "EPUB Builder API",
        "endpoints": {
            "create": "/epub",
            "validate": "/validate"
        }
    }
