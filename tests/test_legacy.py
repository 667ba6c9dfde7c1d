from docextract.core.entities.document import DocType
from docextract.infrastructure.legacy.legacy_extractor import LegacyExtractor
from docextract.infrastructure.text.normalizer import normalize_preserving_lines


def _extract(raw):
    return LegacyExtractor().extract(normalize_preserving_lines(raw))


def test_empty_text():
    result = _extract("")
    assert result.doc_type == DocType.UNKNOWN
    assert result.fields == {}


def test_insurance_card_by_operator_name():
    result = _extract("BENEFICIARIO: JOSE CARLOS LIMA\nHAPVIDA\nCARTAO 1234 5678 9012 3456")
    assert result.doc_type == DocType.INSURANCE_CARD
    assert result.fields["issuer_name"] == "Hapvida"
    assert result.fields["holder_name"] == "JOSE CARLOS LIMA"
    assert result.fields["card_number"] == "1234567890123456"
    assert result.field_strategies["card_number"] == "legacy_card_number"


def test_insurance_card_by_ans_code():
    result = _extract("ANS - N° 00.070-1\nPRODUTO: PLENO NACIONAL")
    assert result.doc_type == DocType.INSURANCE_CARD
    assert result.fields["ans_code"] == "000701"
    assert result.fields["plan"] == "PLENO NACIONAL"


def test_identity_fallback_with_gender():
    result = _extract("NOME: ANA PAULA SOUZA\nSEXO: F\nCPF 529.982.247-25")
    assert result.doc_type == DocType.IDENTITY_CARD
    assert result.fields["holder_name"] == "ANA PAULA SOUZA"
    assert result.fields["cpf"] == "529.982.247-25"
    assert result.fields["gender"] == "F"


def test_license_keyword_sets_type():
    result = _extract("HABILITACAO\nNOME: ANA PAULA SOUZA")
    assert result.doc_type == DocType.DRIVER_LICENSE


def test_text_without_document_anchor_is_unknown():
    result = _extract("NOTA FISCAL\nPADARIA SAO JOAO\nTOTAL R$ 25,00")
    assert result.doc_type == DocType.UNKNOWN
    assert result.fields == {}


def test_repeated_digit_ans_code_is_rejected():
    result = _extract("ANS 111111\nHAPVIDA")
    assert result.doc_type == DocType.INSURANCE_CARD
    assert "ans_code" not in result.fields

    assert _extract("ANS 111111\nANS 326305").fields["ans_code"] == "326305"


def test_operator_names_match_whole_words():
    result = _extract("SEGURO FAMILIA\nNOME: ANA PAULA SOUZA")
    assert "issuer_name" not in result.fields
    assert result.doc_type == DocType.IDENTITY_CARD
