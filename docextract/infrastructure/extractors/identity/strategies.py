"""
Adapter: Identity Field Strategies

Estratégias por campo para RG, CIN e CNH. Cada uma recebe as linhas
normalizadas (layout preservado) e devolve um valor já validado ou
None. A ordem em que são tentadas é definida em layouts.py.
"""

import re
from collections.abc import Callable, Sequence

from docextract.core.interfaces.field_strategy import IFieldStrategy
from docextract.infrastructure.text.patterns import CPF, DATE_ANY, DATE_TOKEN, RG_FORMATTED, RG_LINE
from docextract.infrastructure.text.validators import (
    NAME_DENYLIST,
    digits_only,
    is_valid_cpf_checksum,
    is_valid_name,
    parse_br_date,
    parse_past_date,
)

FILIATION_LABEL = re.compile(r"^FILIACAO\b\s*[:\-]?\s*(.*)$")
NAME_LABEL = re.compile(r"^NOME\b(?:\s+(?:E\s+SOBRENOME|CIVIL|SOCIAL))?\s*[:\-]?\s*(.*)$")
# Rótulos que encerram o bloco de filiação
SECTION_LABEL = re.compile(r"^(?:NATURALIDADE|DOC\b|DATA\b|CPF\b|RG\b|REGISTRO|EXPEDICAO|VALIDADE|ASSINATURA)")
NON_BIRTH_DATE_LABEL = re.compile(r"(?:EXPEDICAO|EMISSAO|VALIDADE|HABILITACAO)\W*$")

UF_CODES = frozenset((
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
))

STATE_UF = {
    "ACRE": "AC", "ALAGOAS": "AL", "AMAPA": "AP", "AMAZONAS": "AM", "BAHIA": "BA",
    "CEARA": "CE", "DISTRITO FEDERAL": "DF", "ESPIRITO SANTO": "ES", "GOIAS": "GO",
    "MARANHAO": "MA", "MATO GROSSO DO SUL": "MS", "MATO GROSSO": "MT", "MINAS GERAIS": "MG",
    "PARAIBA": "PB", "PARANA": "PR", "PARA": "PA", "PERNAMBUCO": "PE", "PIAUI": "PI",
    "RIO DE JANEIRO": "RJ", "RIO GRANDE DO NORTE": "RN", "RIO GRANDE DO SUL": "RS",
    "RONDONIA": "RO", "RORAIMA": "RR", "SANTA CATARINA": "SC", "SAO PAULO": "SP",
    "SERGIPE": "SE", "TOCANTINS": "TO",
}

_PLACE = re.compile(r"^[A-Z][A-Z '\.]{1,38}?(?:\s*[-/,]\s*([A-Z]{2}))?$")
_PLACE_DENYLIST = re.compile(r"\b(?:" + "|".join(w for w in NAME_DENYLIST if w != "BRASIL") + r")\b")


def joined(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def format_cpf(digits: str) -> str:
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def is_valid_registry_number(value: str) -> bool:
    """RG: 7 a 10 posições (dígito verificador pode ser X) e não uma data."""
    compact = re.sub(r"[.\-\s]", "", value)
    if not re.fullmatch(r"\d{6,9}[\dX]", compact) or not 7 <= len(compact) <= 10:
        return False
    if len(compact) == 8 and compact.isdigit() and value.strip() == compact:
        return parse_br_date(f"{compact[:2]}/{compact[2:4]}/{compact[4:]}") is None
    return True


def is_valid_place(value: str) -> bool:
    """'SAO PAULO - SP', 'RIO DE JANEIRO/RJ', 'CAMPINAS'."""
    match = _PLACE.match(value)
    if not match:
        return False
    if match.group(1) and match.group(1) not in UF_CODES:
        return False
    return _PLACE_DENYLIST.search(value) is None


# ─── Nome ───────────────────────────────────────────────────


class NameAfterLabelStrategy(IFieldStrategy):
    """'NOME: FULANO DE TAL' ou rótulo 'NOME' sozinho com o nome na linha seguinte."""

    strategy_id = "name_label"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            match = NAME_LABEL.match(line)
            if not match:
                continue
            inline = match.group(1).strip()
            if inline:
                if is_valid_name(inline):
                    return inline
                continue
            if i + 1 < len(lines) and is_valid_name(lines[i + 1]):
                return lines[i + 1]
        return None


class NameBeforeFiliationStrategy(IFieldStrategy):
    """Layout antigo: o nome do titular vem logo acima de 'FILIAÇÃO'."""

    strategy_id = "name_before_filiation"
    LOOKBACK = 3

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            if not FILIATION_LABEL.match(line):
                continue
            for j in range(i - 1, max(-1, i - 1 - self.LOOKBACK), -1):
                if is_valid_name(lines[j]):
                    return lines[j]
        return None


class NameAfterFiliationStrategy(IFieldStrategy):
    """Layout regional (SP): o nome vem na primeira linha após 'FILIAÇÃO' sozinho."""

    strategy_id = "name_after_filiation"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            match = FILIATION_LABEL.match(line)
            if not match or match.group(1).strip():
                continue
            if i + 1 < len(lines) and is_valid_name(lines[i + 1]):
                return lines[i + 1]
        return None


class NameAfterRegistryNumberStrategy(IFieldStrategy):
    """Nome na linha seguinte ao número do RG isolado."""

    strategy_id = "name_after_registry_number"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines[:-1]):
            if RG_LINE.match(line) and is_valid_name(lines[i + 1]):
                return lines[i + 1]
        return None


class StructuralNameStrategy(IFieldStrategy):
    """Último recurso: primeira linha isolada que passa no predicado de nome."""

    strategy_id = "name_structural"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for line in lines:
            if is_valid_name(line):
                return line
        return None


# ─── Números ────────────────────────────────────────────────


class RegexFieldStrategy(IFieldStrategy):
    """
    Aplica um regex sobre o texto das linhas unidas e devolve o
    primeiro candidato que passa em `validate`, transformado por `build`.
    """

    def __init__(
        self,
        strategy_id: str,
        pattern: re.Pattern,
        validate: Callable[[str], bool],
        build: Callable[[str], str] = lambda v: v,
    ):
        self.strategy_id = strategy_id
        self._pattern = pattern
        self._validate = validate
        self._build = build

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for match in self._pattern.finditer(joined(lines)):
            candidate = (match.group(1) if match.groups() else match.group(0)).strip()
            if self._validate(candidate):
                return self._build(candidate)
        return None


class RegistryNumberLineStrategy(IFieldStrategy):
    """Número do RG sozinho numa linha ('48.151.623-42')."""

    strategy_id = "rg_isolated_line"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for line in lines:
            if RG_LINE.match(line) and is_valid_registry_number(line):
                return re.sub(r"\s", "", line)
        return None


def _valid_cpf(value: str) -> bool:
    digits = digits_only(value)
    return len(digits) == 11 and digits != digits[0] * 11


def _cpf_build(value: str) -> str:
    return format_cpf(digits_only(value))


def _compact(value: str) -> str:
    return re.sub(r"\s", "", value)


def registry_number_strategies() -> tuple[IFieldStrategy, ...]:
    return (
        RegistryNumberLineStrategy(),
        RegexFieldStrategy(
            "rg_labeled",
            re.compile(r"\b(?:RG|REGISTRO\s+GERAL|REGISTRO|IDENTIDADE)\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*"
                       r"(\d{1,2}\.?\d{3}\.?\d{3}\s?-?\s?[\dX]{1,2})(?![\d])"),
            is_valid_registry_number, _compact,
        ),
        RegexFieldStrategy("rg_formatted", RG_FORMATTED, is_valid_registry_number, _compact),
    )


def cpf_strategies() -> tuple[IFieldStrategy, ...]:
    return (
        RegexFieldStrategy(
            "cpf_labeled",
            re.compile(r"\bCPF\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*(" + CPF.pattern + r")"),
            _valid_cpf, _cpf_build,
        ),
        RegexFieldStrategy(
            "cpf_formatted",
            re.compile(r"(?<![\d.])\d{3}\.\d{3}\.\d{3}\s?-\s?\d{2}(?!\d)"),
            _valid_cpf, _cpf_build,
        ),
        RegexFieldStrategy(
            "cpf_plain_checksum",
            re.compile(r"(?<![\d.])\d{11}(?!\d)"),
            is_valid_cpf_checksum, _cpf_build,
        ),
    )


# ─── Datas ──────────────────────────────────────────────────


def _iso(value: str) -> str:
    parsed = parse_br_date(value)
    return parsed.isoformat() if parsed else value


def _labeled_date(strategy_id: str, label: str, past_only: bool = True) -> RegexFieldStrategy:
    parse = parse_past_date if past_only else parse_br_date
    return RegexFieldStrategy(
        strategy_id,
        re.compile(label + rf"\s*[:\-]?\s*((?:{DATE_TOKEN})(?!\d))"),
        lambda v: parse(v) is not None,
        _iso,
    )


class OldestDateStrategy(IFieldStrategy):
    """Data de nascimento = a data passada mais antiga sem rótulo de expedição/validade."""

    strategy_id = "birth_oldest_date"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        text = joined(lines)
        candidates = []
        for match in DATE_ANY.finditer(text):
            before = text[max(0, match.start() - 25):match.start()]
            if NON_BIRTH_DATE_LABEL.search(before):
                continue
            parsed = parse_past_date(match.group(0))
            if parsed:
                candidates.append(parsed)
        return min(candidates).isoformat() if candidates else None


def birth_date_strategies() -> tuple[IFieldStrategy, ...]:
    return (
        _labeled_date("birth_labeled", r"\bNASC(?:IMENTO)?\.?(?:\s*/\s*LOCAL)?"),
        OldestDateStrategy(),
    )


def issue_date_strategies() -> tuple[IFieldStrategy, ...]:
    return (_labeled_date("issue_date_labeled", r"\b(?:EXPEDICAO|EMISSAO)"),)


def expiry_date_strategies() -> tuple[IFieldStrategy, ...]:
    return (_labeled_date("expiry_date_labeled", r"\bVALIDADE", past_only=False),)


def first_license_date_strategies() -> tuple[IFieldStrategy, ...]:
    return (_labeled_date("first_license_labeled", r"\b(?:PRIMEIRA|1[ªA]?)\s*HABILITACAO"),)


# ─── Filiação / naturalidade / origem ───────────────────────


class ParentStrategy(IFieldStrategy):
    """
    N-ésimo nome válido do bloco de filiação (0 = mãe, 1 = pai).

    O bloco termina no próximo rótulo de seção ou após 3 linhas.
    """

    MAX_LINES = 3

    def __init__(self, position: int):
        self.position = position
        self.strategy_id = f"filiation_{'mother' if position == 0 else 'father'}"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            match = FILIATION_LABEL.match(line)
            if not match:
                continue
            block = [match.group(1).strip()] if match.group(1).strip() else []
            for follow in lines[i + 1:i + 1 + self.MAX_LINES]:
                if SECTION_LABEL.match(follow):
                    break
                block.append(follow)
            names = [b for b in block if is_valid_name(b)]
            if len(names) > self.position:
                return names[self.position]
        return None


class BirthplaceStrategy(IFieldStrategy):
    """'NATURALIDADE: SAO PAULO - SP' ou valor na linha seguinte ao rótulo."""

    strategy_id = "birthplace_labeled"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            match = re.match(r"^NATURALIDADE\b\s*[:\-]?\s*(.*)$", line)
            if not match:
                continue
            for candidate in (match.group(1).strip(), lines[i + 1] if i + 1 < len(lines) else ""):
                candidate = re.sub(r"\s*([-/])\s*", r" \1 ", candidate).strip()
                if candidate and is_valid_place(candidate):
                    return candidate
        return None


class DocumentOriginStrategy(IFieldStrategy):
    """'DOC. ORIGEM: CERTIDAO DE NASCIMENTO ...' (mesma linha ou seguinte)."""

    strategy_id = "document_origin_labeled"

    def extract_field(self, lines: Sequence[str]) -> str | None:
        for i, line in enumerate(lines):
            match = re.match(r"^DOC\.?\s*(?:DE\s+)?ORIGEM\b\s*[:\-]?\s*(.*)$", line)
            if not match:
                continue
            value = match.group(1).strip() or (lines[i + 1] if i + 1 < len(lines) else "")
            if re.search(r"[A-Z]{3,}", value):
                return value
        return None


class IssuingAuthorityStrategy(IFieldStrategy):
    """Órgão emissor: 'SSP/SP' explícito, ou Secretaria de Segurança + nome do estado."""

    strategy_id = "issuing_authority"
    _EXPLICIT = re.compile(r"\b(SSP|SDS|SESP|SJS|IGP|IIRGD|DETRAN|PC|SESDEC)\s*[/\-]\s*([A-Z]{2})\b")
    _STATE = re.compile(r"\bESTADO\s+D[OAE]S?\s+([A-Z ]+)")

    def extract_field(self, lines: Sequence[str]) -> str | None:
        text = joined(lines)
        for match in self._EXPLICIT.finditer(text):
            if match.group(2) in UF_CODES:
                return f"{match.group(1)}/{match.group(2)}"
        if "SECRETARIA DA SEGURANCA PUBLICA" in text:
            for match in self._STATE.finditer(text):
                state = match.group(1).strip()
                for name, uf in STATE_UF.items():
                    if state.startswith(name):
                        return f"SSP/{uf}"
        return None


# ─── CNH ────────────────────────────────────────────────────


def license_number_strategies() -> tuple[IFieldStrategy, ...]:
    return (
        RegexFieldStrategy(
            "license_number_labeled",
            re.compile(r"\b(?:N[º°O]?\.?\s*)?REGISTRO\s*[:\-]?\s*(\d{11})(?!\d)"),
            lambda v: len(v) == 11,
        ),
        RegexFieldStrategy(
            "license_number_bare",
            re.compile(r"(?<![\d.])(\d{11})(?!\d)"),
            lambda v: not is_valid_cpf_checksum(v),
        ),
    )


def category_strategies() -> tuple[IFieldStrategy, ...]:
    return (
        RegexFieldStrategy(
            "category_labeled",
            re.compile(r"\bCAT(?:EGORIA)?\.?\s*(?:HAB\.?)?\s*[:\-]?\s*(ACC|AB|AC|AD|AE|A|B|C|D|E)\b"),
            lambda v: True,
        ),
    )
