import asyncio

import pytest

from docextract.core.entities.document import DocType
from docextract.core.entities.extraction_result import PipelineState
from docextract.core.interfaces.ocr_engine import OCRServiceError, OCRServiceUnavailable

from tests.fakes import FakeOCREngine
from tests.samples import DRIVER_LICENSE, RG_SP, UNIMED_CARD

MODERN_STATES = [
    "IDLE", "TEXT_NORMALIZED", "TYPE_CLASSIFIED", "ISSUER_RESOLVED",
    "FIELDS_EXTRACTED", "SCORED", "DONE",
]


# ─── Texto ────────────────────────────────────────────────


def test_empty_text_is_unknown_not_error(use_case):
    result = use_case.process_text("")
    assert result.success is False
    assert result.errors == []
    assert result.data == {}
    assert result.document_type.type == DocType.UNKNOWN
    assert result.confidence.overall == pytest.approx(0.1)
    assert result.state == PipelineState.DONE


def test_unimed_card(use_case):
    result = use_case.process_text(UNIMED_CARD)
    assert result.success is True
    assert result.document_type.type == DocType.INSURANCE_CARD
    assert result.data["card_number"] == "09949108250830015"
    assert result.data["plan"] == "COMPACTO"
    assert result.data["ans_code"] == "000701"
    assert result.data["issuer_name"] == "Unimed"
    assert result.data["holder_name"] == "JOAO DA SILVA SANTOS"

    method = result.confidence.method
    assert method.strategy_id == "insurance:UNIMED"
    assert method.path == "modern"
    assert method.field_strategies["card_number"] == "unimed_fragmented"
    assert method.field_strategies["issuer_name"] == "ANS_CODE"
    assert method.details["states"] == MODERN_STATES
    assert result.confidence.overall == pytest.approx(0.98)


def test_recognized_issuer_without_card_number(use_case):
    result = use_case.process_text("UNIMED\nPLANO DE SAUDE\nJOAO DA SILVA SANTOS")
    assert result.document_type.type == DocType.INSURANCE_CARD
    assert "card_number" not in result.data
    assert result.data["issuer_name"] == "Unimed"
    assert result.success is False
    assert result.errors == ["card-number-not-extracted"]


def test_old_rg(use_case):
    result = use_case.process_text(RG_SP)
    assert result.success is True
    assert result.document_type.type == DocType.IDENTITY_CARD
    assert result.data["holder_name"] == "DANIEL COELHO DA COSTA"
    assert result.confidence.method.strategy_id == "identity:RG_ANTIGO"
    assert result.confidence.per_field["holder_name"] == pytest.approx(0.7)
    assert result.confidence.per_field["cpf"] == pytest.approx(0.6)
    assert result.confidence.overall == pytest.approx(0.98)


def test_driver_license(use_case):
    result = use_case.process_text(DRIVER_LICENSE)
    assert result.success is True
    assert result.document_type.type == DocType.DRIVER_LICENSE
    assert result.data["license_number"] == "01234567890"
    assert result.confidence.per_field["cpf"] == pytest.approx(1.0)
    assert result.confidence.overall == pytest.approx(0.97)


def test_legacy_path_wins_on_unclassified_text(use_case):
    result = use_case.process_text("BENEFICIARIO: JOSE CARLOS LIMA\nHAPVIDA\nCARTAO 1234 5678 9012 3456")
    assert result.confidence.method.path == "legacy"
    assert result.document_type.type == DocType.INSURANCE_CARD
    assert result.data["issuer_name"] == "Hapvida"
    assert result.data["card_number"] == "1234567890123456"
    assert result.confidence.overall == pytest.approx(0.47)
    assert result.confidence.overall <= 0.7
    assert result.success is True


def test_non_document_text_stays_unknown(use_case):
    result = use_case.process_text("NOTA FISCAL\nPADARIA SAO JOAO\nTOTAL R$ 25,00")
    assert result.document_type.type == DocType.UNKNOWN
    assert result.success is False
    assert result.data == {}
    assert result.confidence.method.path == "modern"


def test_unknown_operator_keeps_generic_card_number(use_case):
    result = use_case.process_text(
        "HAPVIDA\nPLANO DE SAUDE\nBENEFICIARIO: JOSE CARLOS LIMA\nSERVICOS MEDICOS\nCARTAO 0012345678901"
    )
    assert result.data.get("issuer_name") != "Amil"
    assert "card_number" in result.data
    assert "card-number-not-extracted" not in result.errors


def test_legacy_fallback_can_be_disabled(settings):
    from docextract.config.container import build_use_case

    use_case = build_use_case(settings.model_copy(update={"legacy_fallback_enabled": False}), with_ocr=False)
    result = use_case.process_text("BENEFICIARIO: JOSE CARLOS LIMA\nHAPVIDA\nCARTAO 1234 5678 9012 3456")
    assert result.confidence.method.path == "modern"
    assert result.document_type.type == DocType.UNKNOWN
    assert result.data == {}


def test_stage_latencies_are_recorded(use_case):
    result = use_case.process_text(UNIMED_CARD)
    for stage in ("normalize_ms", "classify_ms", "issuer_ms", "extract_ms", "score_ms", "total_ms"):
        assert stage in result.stage_latencies


# ─── Imagem / OCR ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_process_runs_ocr_then_pipeline(make_use_case):
    engine = FakeOCREngine(text=UNIMED_CARD)
    result = await make_use_case(engine).process(b"image")
    assert engine.calls == 1
    assert result.success is True
    assert result.confidence.method.details["states"][:2] == ["IDLE", "OCR_REQUESTED"]
    assert "ocr_ms" in result.stage_latencies


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [OCRServiceUnavailable("timeout"), OCRServiceError("HTTP 401")])
async def test_ocr_failure_is_reported(make_use_case, error):
    result = await make_use_case(FakeOCREngine(error=error)).process(b"image")
    assert result.success is False
    assert result.errors[0] == "ocr-failure"
    assert result.data == {}
    assert result.state == PipelineState.FAILED_OCR
    assert result.confidence.overall == 0.0
    assert result.confidence.method.details["states"] == ["IDLE", "OCR_REQUESTED", "FAILED_OCR"]


@pytest.mark.asyncio
async def test_empty_ocr_text_is_not_a_failure(make_use_case):
    result = await make_use_case(FakeOCREngine(text="")).process(b"image")
    assert result.state == PipelineState.DONE
    assert result.errors == []
    assert result.document_type.type == DocType.UNKNOWN


class _SlowOCR(FakeOCREngine):
    async def extract_text(self, image_bytes: bytes) -> str:
        await asyncio.sleep(10)
        return ""


@pytest.mark.asyncio
async def test_cancellation_during_ocr_propagates(make_use_case):
    task = asyncio.create_task(make_use_case(_SlowOCR()).process(b"image"))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
