"""
Validadores de campos brasileiros.

Cada predicado é uma função pura: CPF (mod 11), CNS (mod 11
ponderado), datas (plausibilidade de calendário) e nomes.
"""

import re
from datetime import date

# Termos de formulário que nunca fazem parte de um nome de pessoa
NAME_DENYLIST = (
    "REPUBLICA", "FEDERATIVA", "BRASIL", "ESTADO", "SECRETARIA",
    "SEGURANCA", "PUBLICA", "INSTITUTO", "IDENTIFICACAO", "CARTEIRA",
    "IDENTIDADE", "REGISTRO", "GERAL", "FILIACAO", "NATURALIDADE",
    "VALIDA", "TERRITORIO", "NACIONAL", "CPF", "DATA", "NASCIMENTO",
    "EXPEDICAO", "ASSINATURA", "TITULAR", "DIRETOR", "POLEGAR",
    "PROIBIDO", "PLASTIFICAR", "ORIGEM", "NOME", "DOC", "HABILITACAO",
    "CATEGORIA", "VALIDADE", "DETRAN", "MINISTERIO", "DEPARTAMENTO",
    "TRANSITO", "PERMISSAO", "CERTIDAO", "BENEFICIARIO", "PLANO",
    "SAUDE", "CARTAO", "OPERADORA", "ANS", "CNS", "LEI", "CARTORIO",
    "GOVERNO", "ORGAO", "EMISSOR", "EMISSAO", "SEXO", "LOCAL", "CONDUTOR",
    "PRIMEIRA", "OBSERVACOES", "DIREITO", "PAI", "MAE",
)

_DENYLIST_RE = re.compile(r"\b(?:" + "|".join(NAME_DENYLIST) + r")\b")
_NAME_CHARS = re.compile(r"^[A-Z\s\-'\.]+$")

MONTHS_PT = {
    "JAN": 1, "FEV": 2, "MAR": 3, "ABR": 4, "MAI": 5, "JUN": 6,
    "JUL": 7, "AGO": 8, "SET": 9, "OUT": 10, "NOV": 11, "DEZ": 12,
}

_NUMERIC_DATE = re.compile(r"^(\d{1,2})[/\-\.](\d{1,2})[/\-\.](\d{4})$")
_ABBREV_DATE = re.compile(r"^(\d{1,2})\s*/\s*([A-Z]{3})\s*/\s*(\d{4})$")

MIN_YEAR = 1900


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value)


def is_repeated_digits(digits: str) -> bool:
    """Sequência degenerada: no máximo 2 dígitos distintos em código > 4 chars."""
    return len(digits) > 4 and len(set(digits)) <= 2


def is_valid_cpf_checksum(cpf: str) -> bool:
    """Valida os 2 dígitos verificadores do CPF (algoritmo mod-11)."""
    digits = digits_only(cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    nums = [int(d) for d in digits]

    sum_1 = sum(n * w for n, w in zip(nums[:9], range(10, 1, -1)))
    d1 = 11 - (sum_1 % 11)
    d1 = 0 if d1 >= 10 else d1

    sum_2 = sum(n * w for n, w in zip(nums[:10], range(11, 1, -1)))
    d2 = 11 - (sum_2 % 11)
    d2 = 0 if d2 >= 10 else d2

    return nums[9] == d1 and nums[10] == d2


def is_valid_cns(value: str) -> bool:
    """
    Cartão Nacional de Saúde: 15 dígitos, inicia em 1, 2, 7, 8 ou 9
    e soma ponderada (pesos 15..1) divisível por 11.
    """
    digits = digits_only(value)
    if len(digits) != 15 or digits[0] not in "12789":
        return False
    total = sum(int(d) * (15 - i) for i, d in enumerate(digits))
    return total % 11 == 0


def is_valid_name(candidate: str) -> bool:
    """
    Nome de pessoa plausível.

    Só letras/espaços/apóstrofos/hífens/pontos, 2+ palavras, nenhuma
    palavra com menos de 2 letras e nenhum termo de formulário.
    """
    if not candidate:
        return False
    text = candidate.strip()
    if not _NAME_CHARS.match(text):
        return False
    words = text.split()
    if len(words) < 2:
        return False
    if any(len(w) < 2 for w in words):
        return False
    return _DENYLIST_RE.search(text) is None


def parse_br_date(value: str) -> date | None:
    """
    Converte 'DD/MM/AAAA' ou 'DD/MMM/AAAA' (meses em português)
    numa data de calendário válida. None se impossível.
    """
    text = value.strip()
    match = _NUMERIC_DATE.match(text)
    if match:
        day, month, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
    else:
        match = _ABBREV_DATE.match(text)
        if not match or match.group(2) not in MONTHS_PT:
            return None
        day, month, year = int(match.group(1)), MONTHS_PT[match.group(2)], int(match.group(3))

    if year < MIN_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_past_date(value: str, today: date | None = None) -> date | None:
    """Data válida e não futura (nascimento, expedição, 1ª habilitação)."""
    parsed = parse_br_date(value)
    if parsed is None:
        return None
    if parsed > (today or date.today()):
        return None
    return parsed
