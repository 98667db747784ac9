"""FastAPI application for the statement extractor."""

import logging

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.models import ResponseEnvelope
from backend.parsers.validation import ValidationError, validate_batch
from backend.services.pipeline import StatementPipeline
from backend.services.upload import remove_temp_file, save_uploads

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Statement Extractor",
    description="Extracts metadata and categorized transactions from bank statements",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    """Initialize on startup."""
    settings.ensure_directories()
    settings.log_config()
    app.state.pipeline = StatementPipeline.from_settings(settings)


@app.on_event("shutdown")
async def shutdown():
    """Close the OCR client opened at startup."""
    pipeline = getattr(app.state, "pipeline", None)
    if pipeline is not None:
        await pipeline.aclose()


def get_pipeline(request: Request) -> StatementPipeline:
    """Pipeline built at startup."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = StatementPipeline.from_settings(settings)
        request.app.state.pipeline = pipeline
    return pipeline


def _envelope(envelope: ResponseEnvelope, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.to_response())


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "ocr_configured": settings.ocr_configured,
        "llm_provider": settings.llm_provider,
    }


@app.post("/processFiles")
async def process_files(
    files: list[UploadFile] | None = File(None),
    pipeline: StatementPipeline = Depends(get_pipeline),
):
    """Extract a structured statement from up to 12 uploaded files (PDF, image or text)."""
    try:
        validate_batch(files, pipeline.max_files)
    except ValidationError as e:
        return _envelope(ResponseEnvelope.failed(str(e)), 400)

    stored = []
    try:
        stored = await save_uploads(files, settings.uploads_path)
        envelope = await pipeline.process(stored)
    except ValidationError as e:
        return _envelope(ResponseEnvelope.failed(str(e)), 400)
    except Exception as e:
        logger.exception("Error processing files")
        return _envelope(ResponseEnvelope.failed(str(e)), 500)
    finally:
        # The pipeline deletes each file after extraction; this catches early exits
        for uploaded in stored:
            remove_temp_file(uploaded.path)

    return _envelope(envelope, 200 if envelope.success else 500)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.dev_mode,
    )
