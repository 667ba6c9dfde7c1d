"""
Adapter: ANS Code Detector

Extrai o código de registro da operadora na ANS sem saber ainda
qual é a operadora. Lista ordenada de padrões estruturais; o
primeiro candidato válido vence.
"""

import logging
import re

from docextract.infrastructure.text.patterns import PatternRule, first_match, join_groups
from docextract.infrastructure.text.validators import is_repeated_digits

logger = logging.getLogger(__name__)

MIN_CODE_DIGITS = 5
MAX_CODE_DIGITS = 7
NORMALIZED_FLOOR = 4

# Ordem importa: formato estruturado primeiro, rótulos variantes por último.
ANS_RULES: tuple[PatternRule, ...] = (
    PatternRule("ans_structured",
                re.compile(r"\bANS\s*-?\s*N?[º°O]?\.?\s*(\d{2})\.(\d{3})-(\d)"), join_groups),
    PatternRule("ans_hyphen_number", re.compile(r"\bANS\s*-\s*N[º°O]?\.?\s*(\d{6})(?!\d)")),
    PatternRule("ans_colon", re.compile(r"\bANS\s*:\s*(\d{5,7})(?!\d)")),
    PatternRule("ans_spaced", re.compile(r"(?:^|\s)ANS\s+(\d{5,7})(?!\d)")),
    PatternRule("ans_number_label", re.compile(r"\bN[º°O]?\.?\s*ANS\s*:\s*(\d{5,7})(?!\d)")),
    PatternRule("ans_numero_label", re.compile(r"\bNUMERO\s*ANS\s*[:\s]*(\d{5,7})(?!\d)")),
    PatternRule("ans_registro_label", re.compile(r"\bREGISTRO\s*(?:NA\s*)?ANS\s*[:\s\-]*(?:N[º°O]?\.?\s*)?(\d{5,7})(?!\d)")),
    PatternRule("ans_codigo_label", re.compile(r"\bCODIGO\s*(?:NA\s*)?ANS\s*[:\s\-]*(\d{5,7})(?!\d)")),
)


def is_valid_code(code: str) -> bool:
    """5 a 7 dígitos e não degenerado (ex.: '11111', '111110')."""
    if not code.isdigit():
        return False
    if not MIN_CODE_DIGITS <= len(code) <= MAX_CODE_DIGITS:
        return False
    return not is_repeated_digits(code)


def normalize_code(code: str) -> str:
    """Remove zeros à esquerda sem descer de 4 dígitos: '000701' → '0701'."""
    stripped = code.lstrip("0")
    if len(stripped) >= NORMALIZED_FLOOR:
        return stripped
    return code[-NORMALIZED_FLOOR:] if len(code) >= NORMALIZED_FLOOR else code


class ANSCodeDetector:
    """Detector do código ANS por lista ordenada de padrões."""

    def __init__(self, rules: tuple[PatternRule, ...] = ANS_RULES):
        self._rules = rules

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def extract_code(self, normalized_text: str, normalized: bool = False) -> str | None:
        """
        Devolve o código bruto (ou normalizado, se pedido) ou None.

        Candidato rejeitado → segue para o próximo padrão.
        """
        found = self.extract_with_rule(normalized_text)
        if found is None:
            return None
        code, _ = found
        return normalize_code(code) if normalized else code

    def extract_with_rule(self, normalized_text: str) -> tuple[str, str] | None:
        """Como extract_code, mas devolve também o id do padrão vencedor."""
        if not normalized_text:
            return None
        found = first_match(
            self._rules,
            normalized_text,
            accept=lambda value, _m: is_valid_code(value),
            all_occurrences=False,
        )
        if found:
            logger.debug("Código ANS %s via %s", found[0], found[1])
        return found
