"""
Registry: Card Extractors

Mapa chave da operadora → estratégia. Nova operadora = registrar
uma nova estratégia; o orquestrador não muda.
"""

import logging

from docextract.core.interfaces.card_extractor import ICardExtractor
from docextract.infrastructure.extractors.cards.amil import AmilCardExtractor
from docextract.infrastructure.extractors.cards.bradesco import BradescoCardExtractor
from docextract.infrastructure.extractors.cards.generic import GenericCardExtractor
from docextract.infrastructure.extractors.cards.porto_seguro import PortoSeguroCardExtractor
from docextract.infrastructure.extractors.cards.sulamerica import SulAmericaCardExtractor
from docextract.infrastructure.extractors.cards.unimed import UnimedCardExtractor

logger = logging.getLogger(__name__)


class CardExtractorRegistry:
    """Seleciona a estratégia pela chave da operadora; genérica se ausente."""

    def __init__(self, fallback: ICardExtractor | None = None):
        self._extractors: dict[str, ICardExtractor] = {}
        self._fallback = fallback or GenericCardExtractor()

    def register(self, extractor: ICardExtractor) -> None:
        if extractor.issuer_key in self._extractors:
            logger.warning("Substituindo estratégia de %s", extractor.issuer_key)
        self._extractors[extractor.issuer_key] = extractor

    def get(self, issuer_key: str | None) -> ICardExtractor | None:
        """Estratégia registrada para a operadora, ou None."""
        if not issuer_key:
            return None
        return self._extractors.get(issuer_key)

    def resolve(self, issuer_key: str | None) -> ICardExtractor:
        """Estratégia da operadora, ou a genérica."""
        return self.get(issuer_key) or self._fallback

    @property
    def fallback(self) -> ICardExtractor:
        return self._fallback

    @property
    def issuer_keys(self) -> list[str]:
        return list(self._extractors)

    @classmethod
    def default(cls) -> "CardExtractorRegistry":
        registry = cls()
        for extractor in (
            UnimedCardExtractor(),
            BradescoCardExtractor(),
            SulAmericaCardExtractor(),
            AmilCardExtractor(),
            PortoSeguroCardExtractor(),
        ):
            registry.register(extractor)
        return registry
