"""
Funções para extrair números dos textos de exibição dos planos
e formatar valores em euros no padrão espanhol.
"""
import logging
import math
import re
from datetime import datetime
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_CURRENCY_RUN = re.compile(r"[\d.,]+")
_NUMERIC_PREFIX = re.compile(r"\d*\.?\d*")
_FIRST_INT = re.compile(r"\d+")
_SLASH_MES = re.compile(r"^(?P<main>[^a-zA-Z]*€/mes)(?P<detail>.*)$")


def parse_currency(raw: str) -> float:
    """
    Extrai o valor numérico de um texto monetário no formato espanhol.

    Pega a primeira sequência de dígitos/separadores, remove os pontos de
    milhar e troca a primeira vírgula decimal por ponto.
    Texto sem número retorna 0 (não levanta erro).

    Exemplos:
        "1.500,00€" → 1500.0
        "375€/mes" → 375.0
        "abc" → 0
    """
    match = _CURRENCY_RUN.search(raw or "")
    if not match:
        logger.warning(f"Texto monetário sem número, usando 0: raw={raw!r}")
        return 0.0

    normalized = match.group(0).replace(".", "").replace(",", ".", 1)
    # Mesmo comportamento de um parse de prefixo: "1.5.0" → 1.5
    prefix = _NUMERIC_PREFIX.match(normalized).group(0)
    try:
        return float(prefix)
    except ValueError:
        logger.warning(f"Texto monetário não interpretável, usando 0: raw={raw!r}")
        return 0.0


def parse_months(raw: str) -> int:
    """
    Extrai o primeiro número inteiro de um texto de compromisso.

    Exemplos:
        "30 meses en la RedGW" → 30
        "Sin compromiso" → 0
    """
    match = _FIRST_INT.search(raw or "")
    if not match:
        logger.warning(f"Texto de amortização sem número, usando 0: raw={raw!r}")
        return 0
    return int(match.group(0))


def _group_thousands(digits: str) -> str:
    return f"{int(digits):,}".replace(",", ".")


def format_euro(value: float) -> str:
    """
    Formata um número como euros: ponto como separador de milhar,
    arredondado para inteiro e com "€" no final sem espaço.

    Exemplos:
        3500 → "3.500€"
        1234567.6 → "1.234.568€"
    """
    rounded = math.floor(value + 0.5)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{_group_thousands(str(abs(rounded)))}€"


def format_number_es(value: float, decimals: int = 0) -> str:
    """
    Formata um número com separadores espanhóis (milhar "." e decimal ",").
    """
    text = f"{abs(value):.{decimals}f}"
    if "." in text:
        integer, fraction = text.split(".")
    else:
        integer, fraction = text, ""
    sign = "-" if value < 0 and float(text) != 0 else ""
    grouped = _group_thousands(integer)
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"


def split_monthly_payment(text: str) -> Tuple[str, Optional[str]]:
    """
    Separa o texto de cuota mensal em parte principal e detalhe.

    Exemplos:
        "375€/mes en los 4 primeros meses" → ("375€/mes", "en los 4 primeros meses")
        "125€ al mes durante 16 meses" → ("125€ al mes", "durante 16 meses")
        "0€ al mes" → ("0€ al mes", None)
    """
    slash_mes = _SLASH_MES.match(text)
    if slash_mes:
        detail = slash_mes.group("detail").strip()
        return slash_mes.group("main").strip(), detail or None

    if "durante" in text:
        main_part, _, rest = text.partition("durante")
        detail = rest.strip()
        return main_part.strip(), f"durante {detail}" if detail else None

    return text, None


_MONTHS_ES_SHORT = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")


def format_date_es(value: Optional[datetime]) -> str:
    """
    Data curta em espanhol, como na tabela de registros.
    Ex: datetime(2025, 2, 3) → "3 feb 2025"
    """
    if value is None:
        return ""
    return f"{value.day} {_MONTHS_ES_SHORT[value.month - 1]} {value.year}"
