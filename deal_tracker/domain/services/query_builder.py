"""
CONSTRUTOR DE FILTROS
=====================

Transforma critérios opcionais de busca em cláusula WHERE + lista de
parâmetros posicionais, usando "?" como placeholder universal.

Não conhece o banco: cada adapter traduz o "?" para a sintaxe nativa.

Ordem fixa de avaliação (os parâmetros precisam bater com os placeholders):
    texto livre -> stage -> status -> deal_type -> owner
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from deal_tracker.domain.entities import (
    DEAL_TYPE_VALUES,
    STAGE_VALUES,
    STATUS_VALUES,
    SEARCHABLE_FIELDS,
)

LIKE_ESCAPE = "\\"


@dataclass
class SearchCriteria:
    """Critérios de busca (todos opcionais)."""
    q: Optional[str] = None
    deal_type: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None
    owner: Optional[str] = None


@dataclass
class QueryFilter:
    """Resultado do builder: cláusula pronta + parâmetros em ordem."""
    where_clause: str = ""
    params: List[Any] = field(default_factory=list)


def _substring_pattern(term: str) -> str:
    """Padrão LIKE literal (escapa %, _ e a própria barra)."""
    escaped = (
        term.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _contains(column: str) -> str:
    return f"LOWER({column}) LIKE ? ESCAPE '{LIKE_ESCAPE}'"


def _enum_value(raw: Optional[str], allowed) -> Optional[str]:
    if not raw:
        return None
    value = str(raw).strip().lower()
    return value if value in allowed else None


def build(criteria: Optional[SearchCriteria] = None) -> QueryFilter:
    """
    Monta o filtro.

    Valores de enum fora do conjunto são ignorados (não viram predicado),
    o que impede injetar colunas/valores arbitrários.
    """
    criteria = criteria or SearchCriteria()
    predicates: List[str] = []
    params: List[Any] = []

    q = (criteria.q or "").strip()
    if q:
        pattern = _substring_pattern(q)
        predicates.append("(" + " OR ".join(_contains(col) for col in SEARCHABLE_FIELDS) + ")")
        params.extend([pattern] * len(SEARCHABLE_FIELDS))

    for column, raw, allowed in (
        ("stage", criteria.stage, STAGE_VALUES),
        ("status", criteria.status, STATUS_VALUES),
        ("deal_type", criteria.deal_type, DEAL_TYPE_VALUES),
    ):
        value = _enum_value(raw, allowed)
        if value:
            predicates.append(f"{column} = ?")
            params.append(value)

    owner = (criteria.owner or "").strip()
    if owner:
        predicates.append(_contains("owner"))
        params.append(_substring_pattern(owner))

    if not predicates:
        return QueryFilter()

    return QueryFilter(where_clause="WHERE " + " AND ".join(predicates), params=params)
