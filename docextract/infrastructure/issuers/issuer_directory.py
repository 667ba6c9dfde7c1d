"""
Adapter: Static Issuer Directory

Tabela embutida código ANS → operadora, opcionalmente estendida
por um arquivo JSON (validado com pydantic).
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, field_validator

from docextract.core.interfaces.issuer_directory import IIssuerDirectory, IssuerRecord
from docextract.infrastructure.issuers.ans_detector import normalize_code

logger = logging.getLogger(__name__)


BUILTIN_ISSUERS: tuple[IssuerRecord, ...] = (
    IssuerRecord(key="UNIMED", name="Unimed", ans_code="000701"),
    IssuerRecord(key="SULAMERICA", name="Sul América", ans_code="006246"),
    IssuerRecord(key="AMIL", name="Amil", ans_code="326305"),
    IssuerRecord(key="PORTO", name="Porto Seguro", ans_code="000582"),
    IssuerRecord(key="BRADESCO", name="Bradesco Saúde", ans_code="005711"),
)


class IssuerEntry(BaseModel):
    """Entrada do arquivo JSON de operadoras."""
    key: str
    name: str
    ans_code: str

    @field_validator("key")
    @classmethod
    def _upper_key(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("ans_code")
    @classmethod
    def _digits_only(cls, v: str) -> str:
        v = v.strip()
        if not v.isdigit():
            raise ValueError(f"código ANS deve conter só dígitos: {v!r}")
        return v


class StaticIssuerDirectory(IIssuerDirectory):
    """Diretório em memória, indexado pelo código ANS normalizado."""

    def __init__(self, records: tuple[IssuerRecord, ...] | list[IssuerRecord] = BUILTIN_ISSUERS):
        self._by_code: dict[str, IssuerRecord] = {}
        self._by_key: dict[str, IssuerRecord] = {}
        for record in records:
            self.register(record)

    def register(self, record: IssuerRecord) -> None:
        self._by_code[normalize_code(record.ans_code)] = record
        self._by_key.setdefault(record.key, record)

    def lookup(self, ans_code: str) -> IssuerRecord | None:
        if not ans_code:
            return None
        return self._by_code.get(normalize_code(ans_code))

    def by_key(self, key: str) -> IssuerRecord | None:
        return self._by_key.get(key.upper())

    @classmethod
    def from_json(cls, path: str | Path) -> "StaticIssuerDirectory":
        """
        Carrega a tabela embutida + entradas do arquivo.

        Formato: lista de objetos {"key", "name", "ans_code"}.
        Entradas do arquivo sobrescrevem códigos já existentes.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        entries = [IssuerEntry.model_validate(item) for item in raw]
        directory = cls()
        for entry in entries:
            directory.register(IssuerRecord(key=entry.key, name=entry.name, ans_code=entry.ans_code))
        logger.info("Tabela de operadoras: %d entradas extras de %s", len(entries), path)
        return directory
