"""
Use Case: Extract Document

Orquestra: OCR → Normalização → Classificação → Operadora →
Extração de campos → Confiança → Resultado.
Mede latência de cada etapa e registra a trilha de estados.

Só a falha de transporte do OCR é terminal; qualquer outra etapa
que não encontra nada apenas reduz a confiança e segue adiante.
"""

import logging
import time

from docextract.core.entities.document import DocType, DocumentTypeResult, IssuerIdentity
from docextract.core.entities.extraction_result import (
    ConfidenceReport,
    ExtractionResult,
    MethodTrace,
    PipelineState,
)
from docextract.core.interfaces.ocr_engine import IOCREngine, OCRError
from docextract.infrastructure.classification.document_classifier import DocumentClassifier
from docextract.infrastructure.extractors.cards.registry import CardExtractorRegistry
from docextract.infrastructure.extractors.identity.identity_extractor import (
    IdentityDocumentExtractor,
    IdentityExtraction,
)
from docextract.infrastructure.issuers.ans_detector import ANSCodeDetector
from docextract.infrastructure.issuers.issuer_detector import IssuerDetector
from docextract.infrastructure.legacy.legacy_extractor import LegacyExtractor
from docextract.infrastructure.scoring.confidence_model import ConfidenceModel
from docextract.infrastructure.text.normalizer import (
    extract_lines,
    normalize,
    normalize_preserving_lines,
)

logger = logging.getLogger(__name__)

LEGACY_BASE_CONFIDENCE = 0.3
LEGACY_CONFIDENCE_CAP = 0.7


def _ms(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000, 2)


class ExtractDocumentUseCase:
    """
    Use Case: recebe imagem → extrai texto → devolve ExtractionResult.

    Dependency Injection: todas as dependências vêm pelo construtor.
    O caminho legado é opcional (None desliga o fallback).
    """

    PIPELINE_VERSION = "0.3.0"

    def __init__(
        self,
        ocr_engine: IOCREngine | None,
        classifier: DocumentClassifier,
        ans_detector: ANSCodeDetector,
        issuer_detector: IssuerDetector,
        card_registry: CardExtractorRegistry,
        identity_extractor: IdentityDocumentExtractor,
        confidence_model: ConfidenceModel,
        legacy_extractor: LegacyExtractor | None = None,
        min_usable_confidence: float = 0.75,
        legacy_fallback_enabled: bool = True,
    ):
        self._ocr = ocr_engine
        self._classifier = classifier
        self._ans = ans_detector
        self._issuers = issuer_detector
        self._cards = card_registry
        self._identity = identity_extractor
        self._scoring = confidence_model
        self._legacy = legacy_extractor
        self._min_usable = min_usable_confidence
        self._legacy_enabled = legacy_fallback_enabled

    async def process(self, image_bytes: bytes) -> ExtractionResult:
        """
        Executa o pipeline completo a partir da imagem.

        A única suspensão é a chamada ao OCR; cancelamento durante a
        espera propaga normalmente. Falha de transporte vira FAILED_OCR
        sem dados parciais.
        """
        if self._ocr is None:
            raise RuntimeError("Nenhum motor de OCR configurado")

        t0 = time.perf_counter()
        try:
            raw_text = await self._ocr.extract_text(image_bytes)
        except OCRError as e:
            logger.warning("Falha no OCR: %s", e)
            result = ExtractionResult.failed_ocr(str(e), pipeline_version=self.PIPELINE_VERSION)
            result.stage_latencies = {"ocr_ms": _ms(t0)}
            return result

        ocr_ms = _ms(t0)
        result = self._run(
            raw_text or "",
            states=[PipelineState.IDLE, PipelineState.OCR_REQUESTED],
            stage_latencies={"ocr_ms": ocr_ms},
        )
        result.stage_latencies["total_ms"] = round(result.stage_latencies.get("total_ms", 0.0) + ocr_ms, 2)
        return result

    def process_text(self, raw_text: str) -> ExtractionResult:
        """Mesmo pipeline, para quando o texto já está disponível."""
        return self._run(raw_text or "", states=[PipelineState.IDLE], stage_latencies={})

    # ─── Pipeline ────────────────────────────────────────────

    def _run(
        self,
        raw_text: str,
        states: list[PipelineState],
        stage_latencies: dict[str, float],
    ) -> ExtractionResult:
        t_start = time.perf_counter()

        # ── 1. Normalização ────────────────────────────────
        t0 = time.perf_counter()
        flat = normalize(raw_text)
        structured = normalize_preserving_lines(raw_text)
        stage_latencies["normalize_ms"] = _ms(t0)
        states.append(PipelineState.TEXT_NORMALIZED)

        # ── 2. Classificação ───────────────────────────────
        t0 = time.perf_counter()
        doc_type = self._classifier.classify(flat)
        stage_latencies["classify_ms"] = _ms(t0)
        states.append(PipelineState.TYPE_CLASSIFIED)

        # ── 3. Operadora (só carteirinha) ──────────────────
        t0 = time.perf_counter()
        issuer = IssuerIdentity()
        ans_rule = None
        if doc_type.type == DocType.INSURANCE_CARD:
            found = self._ans.extract_with_rule(flat)
            ans_code, ans_rule = found if found else (None, None)
            issuer = self._issuers.identify(flat, ans_code)
        stage_latencies["issuer_ms"] = _ms(t0)
        states.append(PipelineState.ISSUER_RESOLVED)

        # ── 4. Campos ──────────────────────────────────────
        t0 = time.perf_counter()
        errors: list[str] = []
        method = MethodTrace(strategy_id="unknown")
        fields: dict[str, str] = {}

        if doc_type.type == DocType.INSURANCE_CARD:
            fields, method = self._extract_insurance(structured, issuer, ans_rule)
            if issuer.resolved and "card_number" not in fields:
                errors.append("card-number-not-extracted")
        elif doc_type.type == DocType.IDENTITY_CARD:
            extraction = self._identity.extract(extract_lines(structured), doc_type.subtype)
            fields, method = self._identity_trace(extraction, doc_type)
        elif doc_type.type == DocType.DRIVER_LICENSE:
            extraction = self._identity.extract_driver_license(extract_lines(structured))
            fields, method = self._identity_trace(extraction, doc_type)
        stage_latencies["extract_ms"] = _ms(t0)
        states.append(PipelineState.FIELDS_EXTRACTED)

        # ── 5. Confiança ───────────────────────────────────
        t0 = time.perf_counter()
        method.details["classifier_matches"] = doc_type.match_count
        report = self._scoring.score(doc_type.type, doc_type.confidence, fields, method)
        success = self._scoring.is_success(doc_type.type, fields)

        # ── 5b. Fallback legado ────────────────────────────
        if self._legacy is not None and self._legacy_enabled and report.overall < self._min_usable:
            t_legacy = time.perf_counter()
            legacy = self._legacy_path(structured)
            stage_latencies["legacy_ms"] = _ms(t_legacy)
            legacy_type, legacy_fields, legacy_report = legacy
            method.details["legacy_confidence"] = legacy_report.overall
            if legacy_report.overall > report.overall:
                logger.info(
                    "Caminho legado preferido (%.2f > %.2f)", legacy_report.overall, report.overall,
                )
                legacy_report.method.details["modern_confidence"] = report.overall
                doc_type, fields, report = legacy_type, legacy_fields, legacy_report
                success = self._scoring.is_success(doc_type.type, fields)
                errors = []
        stage_latencies["score_ms"] = _ms(t0)
        states.append(PipelineState.SCORED)

        # ── 6. Resultado ───────────────────────────────────
        states.append(PipelineState.DONE)
        report.method.details["states"] = [s.value for s in states]
        stage_latencies["total_ms"] = _ms(t_start)

        logger.info(
            "Extração concluída: tipo=%s caminho=%s campos=%d confiança=%.2f",
            doc_type.type.value, report.method.path, len(fields), report.overall,
        )
        return ExtractionResult(
            success=success,
            data=fields,
            document_type=doc_type,
            confidence=report,
            errors=errors,
            state=PipelineState.DONE,
            stage_latencies=stage_latencies,
            pipeline_version=self.PIPELINE_VERSION,
        )

    def _extract_insurance(
        self,
        text: str,
        issuer: IssuerIdentity,
        ans_rule: str | None,
    ) -> tuple[dict[str, str], MethodTrace]:
        """
        Operadora reconhecida sem estratégia registrada, ou não
        reconhecida, cai na genérica. Operadora com estratégia que não
        acha o número fica sem número.
        """
        extractor = self._cards.resolve(issuer.issuer_key)
        extraction = extractor.extract(text)

        fields: dict[str, str] = {}
        if extraction.card_number:
            fields["card_number"] = extraction.card_number
        fields.update(extraction.supporting_fields)
        if issuer.issuer_code:
            fields["ans_code"] = issuer.issuer_code
        if issuer.issuer_name:
            fields["issuer_name"] = issuer.issuer_name

        field_strategies = dict(extraction.field_strategies)
        if ans_rule:
            field_strategies["ans_code"] = ans_rule
        if issuer.method:
            field_strategies["issuer_name"] = issuer.method

        method = MethodTrace(
            strategy_id=f"insurance:{extractor.issuer_key}",
            field_strategies=field_strategies,
            details={"issuer_key": issuer.issuer_key, "issuer_method": issuer.method},
        )
        return fields, method

    @staticmethod
    def _identity_trace(
        extraction: IdentityExtraction,
        doc_type: DocumentTypeResult,
    ) -> tuple[dict[str, str], MethodTrace]:
        prefix = "license" if doc_type.type == DocType.DRIVER_LICENSE else "identity"
        method = MethodTrace(
            strategy_id=f"{prefix}:{extraction.layout}",
            field_strategies=dict(extraction.field_strategies),
            details={"subtype": doc_type.subtype},
        )
        return dict(extraction.fields), method

    def _legacy_path(self, text: str) -> tuple[DocumentTypeResult, dict[str, str], ConfidenceReport]:
        legacy = self._legacy.extract(text)
        base = LEGACY_BASE_CONFIDENCE if legacy.fields else 0.0
        doc_type = DocumentTypeResult(type=legacy.doc_type, confidence=base)
        method = MethodTrace(
            strategy_id=f"legacy:{legacy.doc_type.value}",
            path="legacy",
            field_strategies=dict(legacy.field_strategies),
        )
        report = self._scoring.score(
            legacy.doc_type, base, legacy.fields, method, cap=LEGACY_CONFIDENCE_CAP,
        )
        return doc_type, legacy.fields, report
