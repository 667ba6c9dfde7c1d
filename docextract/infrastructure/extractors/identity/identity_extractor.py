"""
Adapter: Identity Document Extractor

Executa, campo a campo, a cadeia de estratégias do layout do
subtipo (RG antigo, RG genérico, CIN, CNH).
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from docextract.core.entities.document import IdentitySubtype
from docextract.infrastructure.extractors.identity.layouts import (
    DRIVER_LICENSE,
    PARENT_FIELDS,
    Layout,
    default_layouts,
)

logger = logging.getLogger(__name__)


@dataclass
class IdentityExtraction:
    """Campos extraídos + estratégia vencedora de cada um."""
    fields: dict[str, str] = field(default_factory=dict)
    field_strategies: dict[str, str] = field(default_factory=dict)
    layout: str = ""


class IdentityDocumentExtractor:
    """Aplica o layout do subtipo às linhas do documento."""

    def __init__(self, layouts: dict[str, Layout] | None = None):
        self._layouts = layouts or default_layouts()

    def extract(self, lines: Sequence[str], subtype: str | None) -> IdentityExtraction:
        """
        Args:
            lines: Linhas normalizadas não vazias.
            subtype: Subtipo do classificador, ou "CNH" para habilitação.
        """
        layout_key = subtype if subtype in self._layouts else IdentitySubtype.RG_GENERICO.value
        layout = self._layouts[layout_key]
        result = IdentityExtraction(layout=layout_key)
        if not lines:
            return result

        for field_name, strategies in layout.items():
            source = lines
            if field_name in PARENT_FIELDS and "holder_name" in result.fields:
                holder = result.fields["holder_name"]
                source = [line for line in lines if line != holder]

            for strategy in strategies:
                value = strategy.extract_field(source)
                if value:
                    result.fields[field_name] = value
                    result.field_strategies[field_name] = strategy.strategy_id
                    break

        logger.debug(
            "Layout %s: %d campos (%s)", layout_key, len(result.fields),
            ", ".join(f"{k}←{v}" for k, v in result.field_strategies.items()),
        )
        return result

    def extract_driver_license(self, lines: Sequence[str]) -> IdentityExtraction:
        return self.extract(lines, DRIVER_LICENSE)
