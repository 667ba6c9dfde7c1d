"""
Adapter: Amil Card Extractor

Carteirinha Amil: 9 dígitos. Aparece como "089924939", como
"11581786 7" (dígito verificador separado) ou após o rótulo
"NÚMERO DO BENEFICIÁRIO". Um número de 8 dígitos logo após o
rótulo de nascimento é a data sem separadores, não a carteirinha.
"""

import re

from docextract.infrastructure.extractors.cards.base import BaseCardExtractor
from docextract.infrastructure.text.patterns import PatternRule, join_groups, preceding_text

_BIRTH_LABEL_BEFORE = re.compile(r"NASC\w*\.?\s*[:\-]?\s*$")


class AmilCardExtractor(BaseCardExtractor):
    """Estratégia Amil."""

    issuer_key = "AMIL"
    display_name = "Amil"

    CARD_RULES = (
        PatternRule("amil_beneficiary_split",
                    re.compile(r"NUMERO\s+DO\s+BENEFICIARIO\s*[:\-]?\s*(\d{8})\s(\d)(?!\d)"), join_groups),
        PatternRule("amil_beneficiary_anchor",
                    re.compile(r"NUMERO\s+DO\s+BENEFICIARIO\s*[:\-]?\s*(\d{8,12})(?!\d)")),
        PatternRule("amil_split_check_digit", re.compile(r"(?<![\d/.])(\d{8})\s(\d)(?![\d/.])"), join_groups),
        PatternRule("amil_leading_zero", re.compile(r"(?<!\d)(0\d{8})(?!\d)")),
    )

    PLAN_RULES = (
        PatternRule("amil_medicus", re.compile(r"\bMEDICUS\s*(\d{1,3})\b"), lambda m: f"MEDICUS {m.group(1)}"),
        PatternRule("amil_blue", re.compile(r"\bBLUE\s*(\d{3})\b"), lambda m: f"BLUE {m.group(1)}"),
        PatternRule("amil_s_line",
                    re.compile(r"\b(S\d{3,4})(?:\s+(COPART))?\b"),
                    lambda m: " ".join(g for g in m.groups() if g)),
    )

    def map_plan_name(self, descriptor: str) -> str:
        parts = descriptor.split()
        if parts[-1] == "COPART":
            return f"Amil {' '.join(parts[:-1]).title()} Coparticipação"
        if parts[0] in ("MEDICUS", "BLUE"):
            return f"Amil {parts[0].title()} {' '.join(parts[1:])}"
        return f"Amil {descriptor}"

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        if "BENEFICIARIO" in match.group(0):
            return 8 <= len(value) <= 12
        if len(value) != 9:
            return False
        return _BIRTH_LABEL_BEFORE.search(preceding_text(text, match)) is None
