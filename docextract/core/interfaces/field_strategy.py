"""
Contract: Field Strategy

Estratégia de extração de UM campo de documento de identidade
a partir das linhas do texto (layout preservado).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class IFieldStrategy(ABC):
    """
    Port: Field Strategy

    As estratégias de um campo são tentadas em ordem fixa; a primeira
    que devolve um valor válido encerra a busca.
    """

    strategy_id: str = ""

    @abstractmethod
    def extract_field(self, lines: Sequence[str]) -> str | None:
        """
        Args:
            lines: Linhas normalizadas, não vazias.

        Returns:
            Valor que passou no predicado de validade, ou None.
        """
        ...
