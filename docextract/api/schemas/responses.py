"""
Pydantic schemas — Response models para a API.
"""

from pydantic import BaseModel

from docextract.core.entities.extraction_result import ExtractionResult


class DocumentTypeResponse(BaseModel):
    type: str
    confidence: float
    subtype: str | None = None


class MethodResponse(BaseModel):
    strategy_id: str
    path: str
    field_strategies: dict[str, str] = {}
    details: dict = {}


class ConfidenceResponse(BaseModel):
    overall: float
    per_field: dict[str, float] = {}
    method: MethodResponse


class ExtractionResponse(BaseModel):
    success: bool
    data: dict[str, str]
    document_type: DocumentTypeResponse
    confidence: ConfidenceResponse
    errors: list[str]

    # Meta
    state: str
    pipeline_version: str = ""
    stage_latencies: dict[str, float] = {}

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ExtractionResponse":
        method = result.confidence.method
        return cls(
            success=result.success,
            data=result.data,
            document_type=DocumentTypeResponse(
                type=result.document_type.type.value,
                confidence=result.document_type.confidence,
                subtype=result.document_type.subtype,
            ),
            confidence=ConfidenceResponse(
                overall=result.confidence.overall,
                per_field=result.confidence.per_field,
                method=MethodResponse(
                    strategy_id=method.strategy_id,
                    path=method.path,
                    field_strategies=method.field_strategies,
                    details=method.details,
                ),
            ),
            errors=result.errors,
            state=result.state.value,
            pipeline_version=result.pipeline_version,
            stage_latencies=result.stage_latencies,
        )
