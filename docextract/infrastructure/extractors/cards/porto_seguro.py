"""
Adapter: Porto Seguro Saúde Card Extractor

Carteirinha Porto: 16 dígitos iniciando no prefixo fixo 4869
("4869 7908 0000 0247").
"""

import re

from docextract.infrastructure.extractors.cards.base import BaseCardExtractor
from docextract.infrastructure.text.patterns import PatternRule, join_groups

CARD_PREFIX = "4869"


class PortoSeguroCardExtractor(BaseCardExtractor):
    """Estratégia Porto Seguro Saúde."""

    issuer_key = "PORTO"
    display_name = "Porto"

    CARD_RULES = (
        PatternRule("porto_grouped",
                    re.compile(r"(?<!\d)4869\s*(\d{4})\s*(\d{4})\s*(\d{4})(?!\d)"),
                    lambda m: CARD_PREFIX + join_groups(m)),
        PatternRule("porto_plain", re.compile(r"(?<!\d)(4869\d{12})(?!\d)")),
    )

    PLAN_RULES = (
        PatternRule("porto_metal_plan",
                    re.compile(r"\b(BRONZE|PRATA|OURO|DIAMANTE)(?:\s+(BRASIL|MAIS|PLUS|NACIONAL))?\b"),
                    lambda m: " ".join(g for g in m.groups() if g)),
    )

    PLAN_NAMES = {
        "BRONZE": "Porto Bronze",
        "PRATA": "Porto Prata",
        "OURO": "Porto Ouro",
        "DIAMANTE": "Porto Diamante",
    }

    def _accept_card(self, value: str, match: re.Match, text: str) -> bool:
        return len(value) == 16 and value.startswith(CARD_PREFIX)
