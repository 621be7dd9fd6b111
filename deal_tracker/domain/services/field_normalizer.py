"""
NORMALIZAÇÃO DE CAMPOS
======================

Funções puras que transformam valores crus (texto, número, vazio) vindos do
cliente ou da planilha em valores canônicos.

Todas são totais: nunca levantam exceção, sempre retornam um valor ou None.
"""

import math
import re
from numbers import Real
from typing import Any, Collection, Optional

from deal_tracker.domain.entities import DEFAULT_CONFIDENCE

# Primeiro número decimal com sinal: "USD 900" -> 900, "$12345.67" -> 12345.67
PRICE_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")

# Inteiro no começo do texto: "80%" -> 80, "75.9" -> 75
LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def _is_number(value: Any) -> bool:
    # bool é subclasse de int, mas não é número para nós
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def clean_text(raw: Any) -> str:
    """Converte para texto com trim. None vira ""."""
    if raw is None:
        return ""
    if isinstance(raw, float) and math.isfinite(raw) and raw.is_integer():
        # Planilhas devolvem 123.0 para células numéricas inteiras
        raw = int(raw)
    try:
        return str(raw).strip()
    except Exception:
        return ""


def normalize_enum(raw: Any, allowed: Collection[str], fallback: Optional[str]) -> Optional[str]:
    """
    Normaliza valor de enum.

    Aplica trim + lower e retorna o valor se ele pertence ao conjunto,
    senão retorna o fallback. Vazio também vira fallback.
    """
    if _is_missing(raw):
        return fallback
    value = clean_text(raw).lower()
    return value if value in allowed else fallback


def parse_optional_number(raw: Any) -> Optional[float]:
    """Número opcional: vazio, inválido ou infinito vira None."""
    if _is_missing(raw) or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def parse_tolerant_price(raw: Any) -> Optional[float]:
    """
    Preço tolerante a formatação de moeda.

    Exemplos:
        12.5          -> 12.5
        "$12,345.67"  -> 12345.67
        "USD 900"     -> 900.0
        "abc"         -> None
    """
    if _is_missing(raw) or isinstance(raw, bool):
        return None

    if _is_number(raw):
        try:
            value = float(raw)
        except (OverflowError, ValueError):
            return None
        return value if math.isfinite(value) else None

    cleaned = clean_text(raw).replace(",", "")
    match = PRICE_PATTERN.search(cleaned)
    if not match:
        return None
    value = float(match.group(0))
    # "9" * 400 vira inf
    return value if math.isfinite(value) else None


def clamp_confidence(raw: Any) -> int:
    """Confiança inteira entre 0 e 100 (padrão 50 quando não dá para ler)."""
    value = DEFAULT_CONFIDENCE

    if _is_number(raw):
        try:
            value = int(raw)
        except (OverflowError, ValueError):
            value = DEFAULT_CONFIDENCE
    elif not _is_missing(raw) and not isinstance(raw, bool):
        match = LEADING_INT_PATTERN.match(clean_text(raw))
        if match:
            digits = match.group(1)
            try:
                value = int(digits)
            except ValueError:
                # Inteiro longo demais para converter: fora da faixa pelo sinal
                value = 0 if digits.startswith("-") else 100

    return max(0, min(100, value))
