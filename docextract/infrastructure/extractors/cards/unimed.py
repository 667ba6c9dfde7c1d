"""
Adapter: Unimed Card Extractor

Carteirinha Unimed: 17 dígitos, frequentemente impressos em
fragmentos "0 994 910825083001 5" que precisam ser remontados
na ordem literal.
"""

import re

from docextract.infrastructure.extractors.cards.base import BaseCardExtractor
from docextract.infrastructure.text.patterns import PatternRule, join_groups
from docextract.infrastructure.text.validators import digits_only, is_valid_cns


class UnimedCardExtractor(BaseCardExtractor):
    """Estratégia Unimed."""

    issuer_key = "UNIMED"
    display_name = "Unimed"

    CARD_RULES = (
        PatternRule("unimed_fragmented",
                    re.compile(r"(?<!\d)(\d)\s+(\d{3})\s+(\d{12})\s+(\d)(?!\d)"), join_groups),
        PatternRule("unimed_17_digits", re.compile(r"(?<!\d)(\d{17})(?!\d)")),
        PatternRule("unimed_labeled",
                    re.compile(r"\b(?:CARTEIRA|CARTAO|CODIGO|MATRICULA)\s*[:\-]?\s*(\d[\d ]{13,22}\d)"),
                    lambda m: digits_only(m.group(1))),
        PatternRule("unimed_long_run", re.compile(r"(?<!\d)(\d{15,18})(?!\d)")),
    )

    PLAN_RULES = (
        PatternRule("unimed_corporate_plan",
                    re.compile(r"\bCORPORATIVO\s+(COMPACTO|EXECUTIVO|PREMIUM|MASTER|SUPREMO|ESPECIAL)\b")),
        PatternRule("unimed_plan_descriptor",
                    re.compile(r"\b(COMPACTO|EXECUTIVO|PREMIUM|MASTER|SUPREMO|ESPECIAL|BASICO)\b")),
        PatternRule("unimed_coverage_plan",
                    re.compile(r"\bUNIMED\s+(NACIONAL|ESTADUAL|REGIONAL|FEDERACAO)\b")),
    )

    PLAN_NAMES = {
        "COMPACTO": "Unimed Compacto",
        "EXECUTIVO": "Unimed Executivo",
        "PREMIUM": "Unimed Premium",
        "MASTER": "Unimed Master",
        "SUPREMO": "Unimed Supremo",
        "BASICO": "Unimed Básico",
        "FEDERACAO": "Unimed Federação",
    }

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        return 15 <= len(value) <= 18 and not is_valid_cns(value)
