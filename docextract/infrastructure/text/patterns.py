"""
Pattern Library.

Regex reutilizáveis agrupados por finalidade (datas, CPF/RG, CNS,
sequências numéricas) e a estrutura de "lista ordenada de padrões":
o primeiro padrão que produz um valor aceito vence.
Todos os padrões assumem texto já normalizado (maiúsculo, sem acentos).
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass


# ─── Datas ────────────────────────────────────────────────

DATE_NUMERIC = re.compile(r"(?<!\d)(\d{2})[/\-\.](\d{2})[/\-\.](\d{4})(?!\d)")
DATE_MONTH_ABBREV = re.compile(r"(?<!\d)(\d{1,2})\s*/\s*([A-Z]{3})\s*/\s*(\d{4})(?!\d)")
DATE_TOKEN = r"\d{1,2}\s*/\s*[A-Z]{3}\s*/\s*\d{4}|\d{2}[/\-\.]\d{2}[/\-\.]\d{4}"
DATE_ANY = re.compile(rf"(?<!\d)(?:{DATE_TOKEN})(?!\d)")

# ─── Documentos pessoais ──────────────────────────────────

CPF = re.compile(r"(?<![\d.])\d{3}\.?\d{3}\.?\d{3}\s?[-/]?\s?\d{2}(?!\d)")
RG_FORMATTED = re.compile(r"(?<![\d.])\d{1,2}\.\d{3}\.\d{3}\s?-?\s?[\dX]{1,2}(?![\d])")
RG_LINE = re.compile(r"^\d{1,2}\.?\d{3}\.?\d{3}\s?-?\s?[\dX]{1,2}$")

# ─── Saúde ────────────────────────────────────────────────

CNS_GROUPED = re.compile(r"(?<!\d)(\d{3})\s?(\d{4})\s?(\d{4})\s?(\d{4})(?!\d)")
CNS_PLAIN = re.compile(r"(?<!\d)\d{15}(?!\d)")

# ─── Sequências numéricas ─────────────────────────────────

DIGIT_RUN = re.compile(r"\d+")
LONG_DIGIT_RUN = re.compile(r"\d{8,}")
SPACED_DIGIT_RUN = re.compile(r"\d[\d ]{7,}\d")


@dataclass(frozen=True)
class PatternRule:
    """
    Um item de uma lista ordenada de padrões.

    `build` transforma o match no valor candidato (ex.: concatena
    grupos); devolver None descarta o match.
    """
    rule_id: str
    pattern: re.Pattern
    build: Callable[[re.Match], str | None] = lambda m: m.group(1) if m.groups() else m.group(0)


def join_groups(match: re.Match) -> str:
    """Concatena todos os grupos capturados na ordem literal."""
    return "".join(g for g in match.groups() if g)


def first_match(
    rules: Iterable[PatternRule],
    text: str,
    accept: Callable[[str, re.Match], bool] | None = None,
    all_occurrences: bool = True,
) -> tuple[str, str] | None:
    """
    Avalia as regras em ordem e devolve (valor, rule_id) do primeiro
    candidato aceito.

    Com all_occurrences=False só a primeira ocorrência de cada padrão
    é considerada; se rejeitada, passa-se ao próximo padrão.
    """
    for rule in rules:
        matches = rule.pattern.finditer(text) if all_occurrences else _first_only(rule.pattern, text)
        for match in matches:
            value = rule.build(match)
            if value is None:
                continue
            if accept is None or accept(value, match):
                return value, rule.rule_id
    return None


def _first_only(pattern: re.Pattern, text: str) -> list[re.Match]:
    match = pattern.search(text)
    return [match] if match else []


def preceding_text(text: str, match: re.Match, width: int = 30) -> str:
    """Trecho imediatamente anterior ao match (para regras de desambiguação)."""
    return text[max(0, match.start() - width):match.start()]
