"""
Contract: Issuer Directory

Tabela código ANS → operadora. Pode ser estática ou um serviço
externo; ausência de correspondência não é erro.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IssuerRecord:
    """Operadora conhecida."""
    key: str              # ex: "UNIMED"
    name: str             # ex: "Unimed"
    ans_code: str         # ex: "000701"


class IIssuerDirectory(ABC):
    """Port: Issuer Directory"""

    @abstractmethod
    def lookup(self, ans_code: str) -> IssuerRecord | None:
        """Busca a operadora pelo código ANS (bruto ou normalizado)."""
        ...

    @abstractmethod
    def by_key(self, key: str) -> IssuerRecord | None:
        """Busca a operadora pela chave interna."""
        ...
