"""
FastAPI Application — Document Extraction Pipeline.

Casca fina sobre o use case: upload → OCR → extração → JSON.
Persistência e UI ficam fora deste serviço.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docextract.api.routes.extract import router as extract_router
from docextract.config.logging_config import configure_logging
from docextract.config.settings import get_settings
from docextract.core.use_cases.extract_document import ExtractDocumentUseCase

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="DocExtract Pipeline",
    description="Structured extraction from Brazilian ID documents and health-insurance cards.",
    version=ExtractDocumentUseCase.PIPELINE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extract_router, prefix="/api/v1", tags=["Extraction"])


# ── Health ──
@app.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "ok",
        "version": ExtractDocumentUseCase.PIPELINE_VERSION,
        "ocr_backend": settings.ocr_backend,
        "legacy_fallback": settings.legacy_fallback_enabled,
    }


def run():
    """Sobe o servidor com host/porta das settings."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
