"""
Entity: Extraction Result

Contrato único devolvido pelo orquestrador, qualquer que seja o
tipo de documento. Sempre produzido, mesmo em falha total.
"""

from dataclasses import dataclass, field
from enum import Enum

from docextract.core.entities.document import DocType, DocumentTypeResult


class PipelineState(str, Enum):
    IDLE = "IDLE"
    OCR_REQUESTED = "OCR_REQUESTED"
    TEXT_NORMALIZED = "TEXT_NORMALIZED"
    TYPE_CLASSIFIED = "TYPE_CLASSIFIED"
    ISSUER_RESOLVED = "ISSUER_RESOLVED"
    FIELDS_EXTRACTED = "FIELDS_EXTRACTED"
    SCORED = "SCORED"
    DONE = "DONE"
    FAILED_OCR = "FAILED_OCR"


@dataclass
class MethodTrace:
    """Rastro de quais estratégias preencheram cada campo."""
    strategy_id: str                            # ex: "insurance:UNIMED", "identity:RG_ANTIGO"
    path: str = "modern"                        # "modern" | "legacy"
    field_strategies: dict[str, str] = field(default_factory=dict)
    details: dict = field(default_factory=dict)


@dataclass
class ConfidenceReport:
    """Confiança global + por campo + rastro do método."""
    overall: float
    per_field: dict[str, float] = field(default_factory=dict)
    method: MethodTrace = field(default_factory=lambda: MethodTrace(strategy_id="none"))


@dataclass
class ExtractionResult:
    """Resultado consolidado de uma extração."""
    success: bool
    data: dict[str, str]                        # campo → valor (presença implica validado)
    document_type: DocumentTypeResult
    confidence: ConfidenceReport
    errors: list[str] = field(default_factory=list)

    # Meta
    state: PipelineState = PipelineState.DONE
    stage_latencies: dict = field(default_factory=dict)  # {"ocr_ms": 120.3, ...}
    pipeline_version: str = ""

    @classmethod
    def failed_ocr(cls, detail: str, pipeline_version: str = "") -> "ExtractionResult":
        """Resultado terminal para falha de transporte do OCR."""
        return cls(
            success=False,
            data={},
            document_type=DocumentTypeResult(type=DocType.UNKNOWN, confidence=0.0),
            confidence=ConfidenceReport(
                overall=0.0,
                method=MethodTrace(strategy_id="none", details={"states": [
                    PipelineState.IDLE.value,
                    PipelineState.OCR_REQUESTED.value,
                    PipelineState.FAILED_OCR.value,
                ]}),
            ),
            errors=["ocr-failure", detail],
            state=PipelineState.FAILED_OCR,
            pipeline_version=pipeline_version,
        )
