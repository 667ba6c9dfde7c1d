"""
Adapter: Text Normalizer

Limpeza determinística do texto do OCR antes de qualquer regex:
maiúsculas, remoção de acentos (decomposição canônica) e
colapso de espaços. Funções puras, nunca falham.
"""

import re
import unicodedata

_HORIZONTAL_WS = re.compile(r"[ \t\f\v\u00a0]+")
_ANY_WS = re.compile(r"\s+")
_BLANK_RUN = re.compile(r"\n{3,}")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9\s]")
_DIGIT_RUN = re.compile(r"\d+")


def strip_diacritics(text: str) -> str:
    """'SAÚDE' → 'SAUDE', 'FILIAÇÃO' → 'FILIACAO'."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")


def normalize(raw: str) -> str:
    """Normalização completa: uma linha só, espaços colapsados."""
    if not raw:
        return ""
    text = strip_diacritics(raw.upper())
    return _ANY_WS.sub(" ", text).strip()


def normalize_preserving_lines(raw: str) -> str:
    """
    Variante que preserva o layout.

    Cada linha é aparada individualmente; 3+ quebras seguidas viram
    no máximo uma linha em branco.
    """
    if not raw:
        return ""
    text = strip_diacritics(raw.upper())
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [_HORIZONTAL_WS.sub(" ", line).strip() for line in text.split("\n")]
    text = _BLANK_RUN.sub("\n\n", "\n".join(lines))
    return text.strip("\n")


def extract_lines(text: str) -> tuple[str, ...]:
    """Linhas não vazias e aparadas, na ordem do documento."""
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def extract_all_numbers(text: str) -> list[str]:
    """Todas as sequências máximas de dígitos, em ordem de aparição."""
    return _DIGIT_RUN.findall(text)


def remove_special_characters(text: str) -> str:
    """Substitui tudo que não é letra, dígito ou espaço por espaço."""
    return _NON_ALNUM.sub(" ", text)


def prepare_for_pattern_matching(raw: str) -> str:
    """Normaliza, remove pontuação e colapsa espaços."""
    return _ANY_WS.sub(" ", remove_special_characters(normalize(raw))).strip()
