"""
Route: POST /extract — Upload de imagem e extração estruturada.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile

from docextract.api.schemas.responses import ExtractionResponse
from docextract.config.container import build_use_case
from docextract.config.settings import get_settings
from docextract.core.use_cases.extract_document import ExtractDocumentUseCase

logger = logging.getLogger(__name__)

router = APIRouter()

# Lazy singleton
_use_case: ExtractDocumentUseCase | None = None


def _get_use_case() -> ExtractDocumentUseCase:
    """Factory — build use case with concrete adapters."""
    global _use_case
    if _use_case is None:
        _use_case = build_use_case(get_settings())
    return _use_case


@router.post("/extract", response_model=ExtractionResponse)
async def extract_document(file: UploadFile = File(...)):
    """
    Extrai os dados de um documento.

    Upload de uma imagem (JPEG/PNG) de RG, CIN, CNH ou carteirinha
    de plano de saúde. Falha do OCR não é erro HTTP: volta com
    success=false e errors=["ocr-failure", ...].
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image (JPEG/PNG)")

    image_bytes = await file.read()
    if len(image_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file")

    result = await _get_use_case().process(image_bytes)
    return ExtractionResponse.from_result(result)
