"""
Contract: Card Extractor

Estratégia de extração da carteirinha de uma operadora.
Cada operadora conhece o layout do seu número de carteirinha
(quantidade de dígitos, agrupamento) e seus campos de apoio.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class CardExtraction:
    """Resultado de uma estratégia de carteirinha."""
    card_number: str | None = None                              # só dígitos, já validado
    supporting_fields: dict[str, str] = field(default_factory=dict)
    field_strategies: dict[str, str] = field(default_factory=dict)  # campo → padrão usado


class ICardExtractor(ABC):
    """
    Port: Card Extractor

    Implementações não lançam exceção quando não encontram nada:
    devolvem card_number=None ("operadora reconhecida, número não
    extraído").
    """

    issuer_key: str = ""

    @abstractmethod
    def extract(self, normalized_text: str) -> CardExtraction:
        """
        Extrai número da carteirinha e campos de apoio.

        Args:
            normalized_text: Texto normalizado preservando linhas.

        Returns:
            CardExtraction com número (ou None) e campos de apoio.
        """
        ...
