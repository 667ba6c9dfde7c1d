import json

import pytest
from pydantic import ValidationError

from docextract.infrastructure.issuers.ans_detector import (
    ANSCodeDetector,
    is_valid_code,
    normalize_code,
)
from docextract.infrastructure.issuers.issuer_detector import IssuerDetector
from docextract.infrastructure.issuers.issuer_directory import StaticIssuerDirectory
from docextract.infrastructure.text.normalizer import normalize


@pytest.fixture
def detector():
    return IssuerDetector(StaticIssuerDirectory())


# ─── Código ANS ───────────────────────────────────────────


def test_structured_code_concatenates_groups():
    assert ANSCodeDetector().extract_code("PLANO ANS - N° 00.070-1") == "000701"
    assert ANSCodeDetector().extract_with_rule("ANS - N° 00.070-1") == ("000701", "ans_structured")


def test_normalized_code_keeps_four_digits():
    assert ANSCodeDetector().extract_code("ANS: 000701", normalized=True) == "0701"
    assert normalize_code("326305") == "326305"
    assert normalize_code("000582") == "0582"


def test_label_variants():
    detector = ANSCodeDetector()
    assert detector.extract_code("REGISTRO ANS 326305") == "326305"
    assert detector.extract_code("NUMERO ANS: 005711") == "005711"
    assert detector.extract_code("ANS 006246") == "006246"


def test_repeated_digit_codes_are_rejected():
    assert not is_valid_code("111110")
    assert is_valid_code("000701")
    assert ANSCodeDetector().extract_code("ANS 111110") is None


def test_no_code_in_text():
    assert ANSCodeDetector().extract_code("") is None
    assert ANSCodeDetector().extract_code("CARTEIRINHA 12345") is None


# ─── Diretório ────────────────────────────────────────────


def test_directory_lookup_ignores_leading_zeros():
    directory = StaticIssuerDirectory()
    assert directory.lookup("000701").key == "UNIMED"
    assert directory.lookup("0701").key == "UNIMED"
    assert directory.lookup("999999") is None
    assert directory.by_key("amil").name == "Amil"


def test_directory_from_json(tmp_path):
    path = tmp_path / "issuers.json"
    path.write_text(json.dumps([{"key": "hapvida", "name": "Hapvida", "ans_code": "368253"}]))
    directory = StaticIssuerDirectory.from_json(path)
    assert directory.lookup("368253").key == "HAPVIDA"
    assert directory.lookup("000701").key == "UNIMED"


def test_directory_rejects_bad_code(tmp_path):
    path = tmp_path / "issuers.json"
    path.write_text(json.dumps([{"key": "x", "name": "X", "ans_code": "ABC"}]))
    with pytest.raises(ValidationError):
        StaticIssuerDirectory.from_json(path)


# ─── Operadora ────────────────────────────────────────────


def test_code_wins_over_text(detector):
    issuer = detector.identify("BRADESCO SAUDE", "000701")
    assert issuer.issuer_key == "UNIMED"
    assert issuer.issuer_name == "Unimed"
    assert issuer.method == "ANS_CODE"


def test_text_pattern(detector):
    issuer = detector.identify("AMIL ASSISTENCIA MEDICA", None)
    assert issuer.issuer_key == "AMIL"
    assert issuer.method == "TEXT_PATTERN"


def test_fuzzy_brand(detector):
    issuer = detector.identify("UNIMEO RIO", None)
    assert issuer.issuer_key == "UNIMED"
    assert issuer.issuer_name == "Unimed"
    assert issuer.method == "FUZZY_TEXT"


def test_unknown_code_is_kept_unresolved(detector):
    issuer = detector.identify("", "123456")
    assert issuer.issuer_code == "123456"
    assert issuer.issuer_name is None
    assert not issuer.resolved


def test_common_card_words_are_not_fuzzy_brands(detector):
    text = normalize("HAPVIDA\nPLANO DE SAUDE\nBENEFICIARIO: JOSE CARLOS LIMA\nSERVICOS MEDICOS\nCARTAO 0012345678901")
    issuer = detector.identify(text, None)
    assert issuer.issuer_key is None
    assert not issuer.resolved
