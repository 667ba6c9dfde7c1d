import pytest

from docextract.infrastructure.extractors.cards.amil import AmilCardExtractor
from docextract.infrastructure.extractors.cards.base import remove_cns
from docextract.infrastructure.extractors.cards.bradesco import BradescoCardExtractor
from docextract.infrastructure.extractors.cards.generic import GenericCardExtractor, longest_digit_run
from docextract.infrastructure.extractors.cards.porto_seguro import PortoSeguroCardExtractor
from docextract.infrastructure.extractors.cards.registry import CardExtractorRegistry
from docextract.infrastructure.extractors.cards.sulamerica import SulAmericaCardExtractor
from docextract.infrastructure.extractors.cards.unimed import UnimedCardExtractor
from docextract.infrastructure.text.normalizer import normalize_preserving_lines

from tests.samples import UNIMED_CARD


def _extract(extractor, raw):
    return extractor.extract(normalize_preserving_lines(raw))


@pytest.mark.parametrize(
    "extractor, raw, expected",
    [
        (UnimedCardExtractor(), "UNIMED\n0 994 910825083001 5\n", "09949108250830015"),
        (UnimedCardExtractor(), "UNIMED\nCARTEIRA 09949108250830015\n", "09949108250830015"),
        (BradescoCardExtractor(), "BRADESCO SAUDE\n954 390 098795 004\n", "954390098795004"),
        (BradescoCardExtractor(), "BRADESCO SAUDE\n954 390 098795\n", "954390098795"),
        (SulAmericaCardExtractor(), "SULAMERICA\n88888 4872 8768 0017\n", "88888487287680017"),
        (AmilCardExtractor(), "AMIL\nNUMERO DO BENEFICIARIO\n11581786 7\n", "115817867"),
        (AmilCardExtractor(), "AMIL\n089924939\n", "089924939"),
        (PortoSeguroCardExtractor(), "PORTO SEGURO SAUDE\n4869 7908 0000 0247\n", "4869790800000247"),
    ],
)
def test_card_number_per_issuer(extractor, raw, expected):
    assert _extract(extractor, raw).card_number == expected


def test_unimed_full_card():
    result = _extract(UnimedCardExtractor(), UNIMED_CARD)
    assert result.card_number == "09949108250830015"
    assert result.field_strategies["card_number"] == "unimed_fragmented"
    assert result.supporting_fields["plan"] == "COMPACTO"
    assert result.supporting_fields["plan_name"] == "Unimed Compacto"
    assert result.supporting_fields["holder_name"] == "JOAO DA SILVA SANTOS"
    assert result.supporting_fields["accommodation"] == "ENFERMARIA"


def test_amil_skips_number_after_birth_label():
    raw = "AMIL\nNASCIMENTO: 012345678\nCARTEIRA 089924939\n"
    assert _extract(AmilCardExtractor(), raw).card_number == "089924939"


def test_amil_plan_names():
    amil = AmilCardExtractor()
    assert amil.map_plan_name("BLUE 300") == "Amil Blue 300"
    assert amil.map_plan_name("S580 COPART") == "Amil S580 Coparticipação"
    assert _extract(amil, "AMIL\nMEDICUS 22\n").supporting_fields["plan"] == "MEDICUS 22"


def test_bradesco_plan():
    result = _extract(BradescoCardExtractor(), "BRADESCO SAUDE\nSAUDE TOP NACIONAL\n")
    assert result.supporting_fields["plan"] == "TOP NACIONAL"
    assert result.supporting_fields["plan_name"] == "Bradesco Saúde Top Nacional"


def test_missing_card_number_is_absent_not_error():
    result = _extract(SulAmericaCardExtractor(), "SULAMERICA\n1234 5678\n")
    assert result.card_number is None


def test_cns_is_never_taken_as_card_number():
    text, cns = remove_cns("CNS 700 0000 0000 0005\nCARTEIRA 1234 5678 9012")
    assert cns == "700000000000005"
    assert "7000" not in text

    result = _extract(GenericCardExtractor(), "CNS 700 0000 0000 0005\nCARTEIRA 1234 5678 9012")
    assert result.card_number == "123456789012"
    assert result.supporting_fields["cns"] == "700000000000005"


def test_longest_run_skips_dates_and_cpf():
    assert longest_digit_run("NASC 15031985\nCPF 52998224725\nCARTAO 12345678") == "12345678"
    assert longest_digit_run("SEM NUMEROS") is None


def test_card_birth_date():
    result = _extract(UnimedCardExtractor(), "UNIMED\nNASCIMENTO: 19/12/1980\nVALIDADE 01/01/2020\n")
    assert result.supporting_fields["birth_date"] == "1980-12-19"
    assert result.field_strategies["birth_date"] == "birth_label"


def test_registry_dispatch():
    registry = CardExtractorRegistry.default()
    assert set(registry.issuer_keys) == {"UNIMED", "BRADESCO", "SULAMERICA", "AMIL", "PORTO"}
    assert isinstance(registry.resolve("AMIL"), AmilCardExtractor)
    assert registry.resolve(None) is registry.fallback
    assert registry.resolve("HAPVIDA") is registry.fallback
    assert registry.get("HAPVIDA") is None
