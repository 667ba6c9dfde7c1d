"""
Base das estratégias de carteirinha.

Passos comuns a todas as operadoras:
    1. Remove números CNS válidos do texto (15 dígitos que
       confundem os padrões de carteirinha)
    2. Aplica a lista ordenada de padrões da operadora
    3. Extrai plano, titular, nascimento e acomodação
"""

import re

from docextract.core.interfaces.card_extractor import CardExtraction, ICardExtractor
from docextract.infrastructure.text.normalizer import extract_lines
from docextract.infrastructure.text.patterns import (
    CNS_GROUPED,
    CNS_PLAIN,
    DATE_ANY,
    DATE_TOKEN,
    PatternRule,
    first_match,
)
from docextract.infrastructure.text.validators import (
    digits_only,
    is_valid_cns,
    is_valid_name,
    parse_past_date,
)

# Palavras de layout de carteirinha que não compõem nome de beneficiário
CARD_BOILERPLATE = re.compile(
    r"\b(?:UNIMED|BRADESCO|SULAMERICA|SUL|AMERICA|AMIL|PORTO|SEGURO|SEGUROS|MEDICUS"
    r"|CORPORATIVO|COMPACTO|EXECUTIVO|PREMIUM|MASTER|SUPREMO|ENF|APTO|CP|TOP|PLUS"
    r"|EXACT|TRADICIONAL|BLUE|COPART|BRONZE|PRATA|OURO|DIAMANTE|NACIONAL|REGIONAL"
    r"|EMPRESA|CONTRATANTE|LTDA|GROUP|ACOMODACAO|ENFERMARIA|APARTAMENTO|COBERTURA"
    r"|SEGMENTACAO|AMBULATORIAL|HOSPITALAR|OBSTETRICIA|CARENCIA|VIGENCIA|ADESAO"
    r"|TITULAR|DEPENDENTE|ABRANGENCIA|REDE|ATENDIMENTO|INDIVIDUAL|COLETIVO)\b"
)

HOLDER_LABEL = re.compile(
    r"\b(?:NOME\s+DO\s+BENEFICIARIO|NOME\s+DO\s+TITULAR|BENEFICIARIO|TITULAR|NOME)"
    r"\s*[:\-]?\s*([A-Z][A-Z '\.\-]{3,60})"
)
BIRTH_LABEL = re.compile(
    rf"\b(?:DATA\s+DE\s+)?NASC(?:IMENTO)?\.?\s*[:\-]?\s*((?:{DATE_TOKEN})(?!\d))"
)
NON_BIRTH_DATE_LABEL = re.compile(
    r"(?:VALIDADE|VALIDO\s+ATE|VIGENCIA|ADESAO|INICIO|EMISSAO|CARENCIA|EXPEDICAO)\W*$"
)
ACCOMMODATION = re.compile(r"\b(ENF|ENFERMARIA|APTO|APT|APARTAMENTO)\b")


def remove_cns(text: str) -> tuple[str, str | None]:
    """
    Apaga do texto os números CNS válidos (substitui por espaços) e
    devolve o primeiro encontrado.
    """
    found: str | None = None
    spans: list[tuple[int, int]] = []
    for pattern in (CNS_GROUPED, CNS_PLAIN):
        for match in pattern.finditer(text):
            digits = digits_only(match.group(0))
            if is_valid_cns(digits):
                spans.append(match.span())
                found = found or digits
    if not spans:
        return text, None
    chars = list(text)
    for start, end in spans:
        for i in range(start, end):
            if chars[i] != "\n":
                chars[i] = " "
    return "".join(chars), found


def extract_holder_name(text: str) -> tuple[str, str] | None:
    """Nome do beneficiário: rótulo explícito, senão linha isolada com cara de nome."""
    for match in HOLDER_LABEL.finditer(text):
        candidate = match.group(1).strip()
        if is_valid_name(candidate) and not CARD_BOILERPLATE.search(candidate):
            return candidate, "holder_label"
    for line in extract_lines(text):
        if is_valid_name(line) and not CARD_BOILERPLATE.search(line):
            return line, "holder_isolated_line"
    return None


def extract_card_birth_date(text: str) -> tuple[str, str] | None:
    """Nascimento rotulado; senão a data passada mais antiga sem rótulo de vigência."""
    for match in BIRTH_LABEL.finditer(text):
        parsed = parse_past_date(match.group(1))
        if parsed:
            return parsed.isoformat(), "birth_label"

    candidates = []
    for match in DATE_ANY.finditer(text):
        if NON_BIRTH_DATE_LABEL.search(text[max(0, match.start() - 20):match.start()]):
            continue
        parsed = parse_past_date(match.group(0))
        if parsed:
            candidates.append(parsed)
    if candidates:
        return min(candidates).isoformat(), "birth_oldest_date"
    return None


class BaseCardExtractor(ICardExtractor):
    """
    Template das estratégias por operadora.

    Subclasses definem CARD_RULES (ordem = prioridade), PLAN_RULES,
    PLAN_NAMES e o predicado _accept_card.
    """

    issuer_key = ""
    display_name = ""
    CARD_RULES: tuple[PatternRule, ...] = ()
    PLAN_RULES: tuple[PatternRule, ...] = ()
    PLAN_NAMES: dict[str, str] = {}

    def extract(self, normalized_text: str) -> CardExtraction:
        result = CardExtraction()
        if not normalized_text:
            return result

        text, cns = remove_cns(normalized_text)
        if cns:
            result.supporting_fields["cns"] = cns
            result.field_strategies["cns"] = "cns_checksum"

        card = first_match(
            self.CARD_RULES,
            text,
            accept=lambda value, match: self._accept_card(value, match, text),
        )
        if card:
            result.card_number, result.field_strategies["card_number"] = card

        plan = first_match(self.PLAN_RULES, text)
        if plan:
            descriptor, rule_id = plan
            result.supporting_fields["plan"] = descriptor
            result.supporting_fields["plan_name"] = self.map_plan_name(descriptor)
            result.field_strategies["plan"] = rule_id

        self._extract_common(text, result)
        return result

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        return not is_valid_cns(value)

    def map_plan_name(self, descriptor: str) -> str:
        """Descritor bruto → nome comercial canônico."""
        key = " ".join(descriptor.split())
        if key in self.PLAN_NAMES:
            return self.PLAN_NAMES[key]
        return f"{self.display_name} {key.title()}".strip()

    @staticmethod
    def _extract_common(text: str, result: CardExtraction) -> None:
        holder = extract_holder_name(text)
        if holder:
            result.supporting_fields["holder_name"], result.field_strategies["holder_name"] = holder

        birth = extract_card_birth_date(text)
        if birth:
            result.supporting_fields["birth_date"], result.field_strategies["birth_date"] = birth

        accommodation = ACCOMMODATION.search(text)
        if accommodation:
            kind = "APARTAMENTO" if accommodation.group(1).startswith("AP") else "ENFERMARIA"
            result.supporting_fields["accommodation"] = kind
