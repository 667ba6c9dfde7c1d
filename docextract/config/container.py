"""
Montagem do use case com os adapters concretos a partir das settings.
"""

import logging

from docextract.config.settings import Settings
from docextract.core.interfaces.ocr_engine import IOCREngine
from docextract.core.use_cases.extract_document import ExtractDocumentUseCase
from docextract.infrastructure.classification.document_classifier import DocumentClassifier
from docextract.infrastructure.extractors.cards.registry import CardExtractorRegistry
from docextract.infrastructure.extractors.identity.identity_extractor import IdentityDocumentExtractor
from docextract.infrastructure.issuers.ans_detector import ANSCodeDetector
from docextract.infrastructure.issuers.issuer_detector import IssuerDetector
from docextract.infrastructure.issuers.issuer_directory import StaticIssuerDirectory
from docextract.infrastructure.legacy.legacy_extractor import LegacyExtractor
from docextract.infrastructure.scoring.confidence_model import ConfidenceModel

logger = logging.getLogger(__name__)


def build_ocr_engine(settings: Settings) -> IOCREngine:
    if settings.ocr_backend == "paddle":
        from docextract.infrastructure.ocr.paddle_ocr_engine import PaddleOCREngine

        return PaddleOCREngine(lang=settings.ocr_lang, use_gpu=settings.ocr_use_gpu)

    from docextract.infrastructure.ocr.http_ocr_engine import HttpOCREngine

    return HttpOCREngine(
        base_url=settings.ocr_service_url,
        timeout=settings.ocr_timeout_seconds,
        connect_timeout=settings.ocr_connect_timeout,
        retry_attempts=settings.ocr_retry_attempts,
        retry_delay=settings.ocr_retry_delay,
        retry_backoff=settings.ocr_retry_backoff,
    )


def build_use_case(
    settings: Settings,
    ocr_engine: IOCREngine | None = None,
    with_ocr: bool = True,
) -> ExtractDocumentUseCase:
    """
    Factory — use case com adapters concretos.

    Args:
        ocr_engine: Engine já construída (testes); senão vem das settings.
        with_ocr: False monta o pipeline só para process_text.
    """
    directory = (
        StaticIssuerDirectory.from_json(settings.issuer_table_path)
        if settings.issuer_table_path
        else StaticIssuerDirectory()
    )
    if ocr_engine is None and with_ocr:
        ocr_engine = build_ocr_engine(settings)

    logger.info("Pipeline montado (ocr=%s)", type(ocr_engine).__name__ if ocr_engine else "nenhum")
    return ExtractDocumentUseCase(
        ocr_engine=ocr_engine,
        classifier=DocumentClassifier(
            insurance_min_matches=settings.insurance_min_matches,
            identity_min_matches=settings.identity_min_matches,
            license_min_matches=settings.license_min_matches,
        ),
        ans_detector=ANSCodeDetector(),
        issuer_detector=IssuerDetector(directory, fuzzy_threshold=settings.issuer_fuzzy_threshold),
        card_registry=CardExtractorRegistry.default(),
        identity_extractor=IdentityDocumentExtractor(),
        confidence_model=ConfidenceModel(),
        legacy_extractor=LegacyExtractor(),
        min_usable_confidence=settings.min_usable_confidence,
        legacy_fallback_enabled=settings.legacy_fallback_enabled,
    )
