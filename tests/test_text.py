from datetime import date

import pytest

from docextract.infrastructure.text.normalizer import (
    extract_all_numbers,
    extract_lines,
    normalize,
    normalize_preserving_lines,
    prepare_for_pattern_matching,
    strip_diacritics,
)
from docextract.infrastructure.text.validators import (
    is_repeated_digits,
    is_valid_cns,
    is_valid_cpf_checksum,
    is_valid_name,
    parse_br_date,
    parse_past_date,
)

SAMPLES = [
    "",
    "  Filiação:\tMaria  José\n\n\n\nSão Paulo  ",
    "Cartão Nacional de Saúde\r\n700 0000 0000 0005",
    "REPÚBLICA\u00a0FEDERATIVA   DO BRASIL",
]


@pytest.mark.parametrize("raw", SAMPLES)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


@pytest.mark.parametrize("raw", SAMPLES)
def test_normalize_preserving_lines_is_idempotent(raw):
    once = normalize_preserving_lines(raw)
    assert normalize_preserving_lines(once) == once


def test_normalize_uppercases_and_strips_accents():
    assert normalize("  Filiação:\tMaria  José ") == "FILIACAO: MARIA JOSE"
    assert strip_diacritics("SAÚDE") == "SAUDE"


def test_preserving_lines_keeps_layout():
    text = normalize_preserving_lines("nome\n  joão   silva \n\n\n\nfim")
    assert text == "NOME\nJOAO SILVA\n\nFIM"
    assert extract_lines(text) == ("NOME", "JOAO SILVA", "FIM")


def test_numbers_and_punctuation_helpers():
    assert extract_all_numbers("ANS 00.070-1") == ["00", "070", "1"]
    assert prepare_for_pattern_matching("CPF: 123.456") == "CPF 123 456"


def test_name_validity():
    assert is_valid_name("JOAO SILVA")
    assert not is_valid_name("JOAO")
    assert not is_valid_name("CARTEIRA DE IDENTIDADE")
    assert not is_valid_name("NOME DO PAI")
    assert not is_valid_name("JOAO 123")
    assert not is_valid_name("O VALIDA EM TODO")


def test_repeated_digits():
    assert is_repeated_digits("111110")
    assert not is_repeated_digits("000701")
    assert not is_repeated_digits("1111")


def test_cpf_checksum():
    assert is_valid_cpf_checksum("529.982.247-25")
    assert not is_valid_cpf_checksum("342.002.171-42")
    assert not is_valid_cpf_checksum("111.111.111-11")


def test_cns_checksum():
    assert is_valid_cns("700000000000005")
    assert not is_valid_cns("700000000000006")
    assert not is_valid_cns("300000000000000")


def test_parse_br_date():
    assert parse_br_date("19/DEZ/1980") == date(1980, 12, 19)
    assert parse_br_date("10/05/1985") == date(1985, 5, 10)
    assert parse_br_date("31/02/2000") is None
    assert parse_br_date("01/01/1899") is None
    assert parse_br_date("01/XYZ/2000") is None


def test_parse_past_date_rejects_future():
    assert parse_past_date("10/05/2030", today=date(2024, 1, 1)) is None
    assert parse_past_date("10/05/2020", today=date(2024, 1, 1)) == date(2020, 5, 10)
