import pytest

from docextract.core.entities.document import IdentitySubtype
from docextract.infrastructure.extractors.identity.identity_extractor import IdentityDocumentExtractor
from docextract.infrastructure.extractors.identity.strategies import (
    IssuingAuthorityStrategy,
    NameAfterFiliationStrategy,
    NameAfterLabelStrategy,
    NameBeforeFiliationStrategy,
    is_valid_place,
    is_valid_registry_number,
)
from docextract.infrastructure.text.normalizer import extract_lines, normalize_preserving_lines

from tests.samples import DRIVER_LICENSE, RG_SP


def _lines(raw):
    return extract_lines(normalize_preserving_lines(raw))


@pytest.fixture
def extractor():
    return IdentityDocumentExtractor()


def test_name_right_after_filiation(extractor):
    result = extractor.extract(_lines(RG_SP), IdentitySubtype.RG_ANTIGO.value)
    assert result.fields["holder_name"] == "DANIEL COELHO DA COSTA"
    assert result.field_strategies["holder_name"] == "name_after_filiation"


def test_sp_layout_full_record(extractor):
    fields = extractor.extract(_lines(RG_SP), IdentitySubtype.RG_ANTIGO.value).fields
    assert fields["mother_name"] == "ROSA COELHO DA COSTA"
    assert fields["father_name"] == "EDIVALDO DA COSTA"
    assert fields["registry_number"] == "48.151.623-42"
    assert fields["cpf"] == "342.002.171-42"
    assert fields["birth_date"] == "1980-12-19"
    assert fields["issue_date"] == "2012-12-21"
    assert fields["birthplace"] == "SAO PAULO - SP"
    assert fields["document_origin"] == "SAO PAULO - SP"
    assert fields["issuing_authority"] == "SSP/SP"


def test_unknown_subtype_uses_generic_layout(extractor):
    result = extractor.extract(_lines("NOME: MARIA DAS DORES\nCPF 529.982.247-25"), None)
    assert result.layout == IdentitySubtype.RG_GENERICO.value
    assert result.fields["holder_name"] == "MARIA DAS DORES"
    assert result.fields["cpf"] == "529.982.247-25"


def test_empty_lines(extractor):
    result = extractor.extract((), IdentitySubtype.CIN.value)
    assert result.fields == {}


def test_driver_license(extractor):
    result = extractor.extract_driver_license(_lines(DRIVER_LICENSE))
    assert result.layout == "CNH"
    assert result.fields["holder_name"] == "CARLOS EDUARDO PEREIRA"
    assert result.fields["license_number"] == "01234567890"
    assert result.fields["cpf"] == "529.982.247-25"
    assert result.fields["birth_date"] == "1985-05-10"
    assert result.fields["category"] == "B"
    assert result.fields["expiry_date"] == "2030-05-10"
    assert result.fields["first_license_date"] == "2005-06-15"


def test_name_label_inline_and_next_line():
    strategy = NameAfterLabelStrategy()
    assert strategy.extract_field(["NOME: ANA PAULA SOUZA"]) == "ANA PAULA SOUZA"
    assert strategy.extract_field(["NOME", "ANA PAULA SOUZA"]) == "ANA PAULA SOUZA"
    assert strategy.extract_field(["NOME", "FILIACAO"]) is None


def test_name_before_filiation():
    lines = ["48.151.623-42", "ANA PAULA SOUZA", "FILIACAO", "MARIA SOUZA"]
    assert NameBeforeFiliationStrategy().extract_field(lines) == "ANA PAULA SOUZA"


def test_filiation_with_inline_value_is_not_holder():
    assert NameAfterFiliationStrategy().extract_field(["FILIACAO: MARIA SOUZA", "JOSE SOUZA"]) is None


def test_registry_number_rejects_dates():
    assert is_valid_registry_number("48.151.623-42")
    assert is_valid_registry_number("12345678X")
    assert not is_valid_registry_number("15031985")
    assert not is_valid_registry_number("123")


def test_places():
    assert is_valid_place("SAO PAULO - SP")
    assert is_valid_place("CAMPINAS")
    assert not is_valid_place("SAO PAULO - XX")
    assert not is_valid_place("CARTORIO CENTRAL")


def test_issuing_authority_explicit():
    assert IssuingAuthorityStrategy().extract_field(["ORGAO EMISSOR SSP/RJ"]) == "SSP/RJ"
