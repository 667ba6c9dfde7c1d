"""
Adapter: Issuer Detector

Identifica a operadora por dois sinais independentes:
    1. Código ANS → tabela de operadoras (autoritativo)
    2. Marca/nome comercial presente no texto
e, por último, uma comparação aproximada (rapidfuzz) para marcas
deformadas pelo OCR ("UNIMEO", "BRADESC0").
"""

import logging
import re

from rapidfuzz import fuzz

from docextract.core.entities.document import IssuerIdentity
from docextract.core.interfaces.issuer_directory import IIssuerDirectory

logger = logging.getLogger(__name__)


# Ordem = prioridade. Marcas explícitas antes das pistas fracas (nomes de plano).
ISSUER_KEYWORDS: tuple[tuple[str, tuple[re.Pattern, ...]], ...] = (
    ("BRADESCO", (re.compile(r"\bBRADESCO\b"),)),
    ("SULAMERICA", (re.compile(r"\bSUL\s?AMERICA\b"),)),
    ("AMIL", (
        re.compile(r"\bAMIL\b"),
        re.compile(r"\bMEDICUS\b"),
        re.compile(r"ASSISTENCIA MEDICA INTERNACIONAL"),
    )),
    ("UNIMED", (re.compile(r"\bUNIMED\b"),)),
    ("PORTO", (
        re.compile(r"\bPORTO\s?(?:SEGURO\s)?SAUDE\b"),
        re.compile(r"\bPORTO SEGURO\b"),
    )),
    ("UNIMED", (re.compile(r"\bCORPORATIVO COMPACTO\b"), re.compile(r"\bCOMPACTO\b"))),
)

# Nenhuma marca próxima de palavra comum do cartão (MEDICUS ~ MEDICOS)
FUZZY_BRANDS: dict[str, str] = {
    "UNIMED": "UNIMED",
    "BRADESCO": "BRADESCO",
    "SULAMERICA": "SULAMERICA",
}

_WORD = re.compile(r"[A-Z]{6,}")


class IssuerDetector:
    """Combina código ANS, palavras-chave e fuzzy match."""

    def __init__(self, directory: IIssuerDirectory, fuzzy_threshold: float = 80.0):
        self._directory = directory
        self._fuzzy_threshold = fuzzy_threshold

    def identify(self, normalized_text: str, ans_code: str | None = None) -> IssuerIdentity:
        """
        Resolve a operadora. Qualquer sinal pode faltar; se ambos
        resolverem e discordarem, o código ANS prevalece.
        """
        by_code = self._directory.lookup(ans_code) if ans_code else None
        text_key, text_method = self._match_text(normalized_text)

        if by_code is not None:
            if text_key and text_key != by_code.key:
                logger.info(
                    "Operadora divergente: código ANS %s → %s, texto → %s (prevalece o código)",
                    ans_code, by_code.key, text_key,
                )
            return IssuerIdentity(
                issuer_code=ans_code,
                issuer_name=by_code.name,
                issuer_key=by_code.key,
                method="ANS_CODE",
            )

        if text_key:
            record = self._directory.by_key(text_key)
            return IssuerIdentity(
                issuer_code=ans_code,
                issuer_name=record.name if record else text_key.title(),
                issuer_key=text_key,
                method=text_method,
            )

        return IssuerIdentity(issuer_code=ans_code)

    def _match_text(self, text: str) -> tuple[str | None, str | None]:
        if not text:
            return None, None
        for key, patterns in ISSUER_KEYWORDS:
            if any(p.search(text) for p in patterns):
                return key, "TEXT_PATTERN"
        fuzzy_key = self._match_fuzzy(text)
        if fuzzy_key:
            return fuzzy_key, "FUZZY_TEXT"
        return None, None

    def _match_fuzzy(self, text: str) -> str | None:
        """Melhor marca com similaridade ≥ limiar contra as palavras do texto."""
        best_key, best_score = None, 0.0
        for word in set(_WORD.findall(text)):
            for brand, key in FUZZY_BRANDS.items():
                score = fuzz.ratio(word, brand)
                if score >= self._fuzzy_threshold and score > best_score:
                    best_key, best_score = key, score
        if best_key:
            logger.debug("Operadora %s por similaridade (%.1f)", best_key, best_score)
        return best_key
