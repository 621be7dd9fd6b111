"""
SANITIZAÇÃO DE OPORTUNIDADES
============================

Monta o registro canônico a partir de um payload qualquer (JSON do cliente,
linha de planilha ou merge de registro salvo + alterações parciais).

O sanitizer NUNCA rejeita: quem exige supplier/product é o serviço.
Assim o merge de um update pode ser sanitizado antes de saber se é válido.
"""

from typing import Any, Dict, Mapping

from deal_tracker.domain.entities import (
    DEAL_TYPE_VALUES,
    STAGE_VALUES,
    STATUS_VALUES,
    TEXT_FIELDS,
    DEFAULT_DEAL_TYPE,
    DEFAULT_STAGE,
    DEFAULT_STATUS,
)
from deal_tracker.domain.services.field_normalizer import (
    clean_text,
    normalize_enum,
    parse_optional_number,
    parse_tolerant_price,
    clamp_confidence,
)


def sanitize(payload: Any) -> Dict[str, Any]:
    """Retorna todos os campos canônicos (sem id e timestamps)."""
    if not isinstance(payload, Mapping):
        payload = {}

    record: Dict[str, Any] = {field: clean_text(payload.get(field)) for field in TEXT_FIELDS}

    # Formulário antigo mandava "euc" em vez de "euc_text"
    if not record["euc_text"]:
        record["euc_text"] = clean_text(payload.get("euc"))

    record["deal_type"] = normalize_enum(payload.get("deal_type"), DEAL_TYPE_VALUES, DEFAULT_DEAL_TYPE)
    record["stage"] = normalize_enum(payload.get("stage"), STAGE_VALUES, DEFAULT_STAGE)
    record["status"] = normalize_enum(payload.get("status"), STATUS_VALUES, DEFAULT_STATUS)
    record["confidence"] = clamp_confidence(payload.get("confidence"))

    record["qty_needed"] = parse_optional_number(payload.get("qty_needed"))
    record["supplier_price"] = parse_tolerant_price(payload.get("supplier_price"))
    record["target_sell_price"] = parse_tolerant_price(payload.get("target_sell_price"))

    return record


def missing_required(record: Mapping[str, Any]) -> bool:
    """True quando falta supplier ou product."""
    return not record.get("supplier") or not record.get("product")
