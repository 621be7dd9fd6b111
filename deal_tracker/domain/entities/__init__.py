"""Entidades do domínio."""

from .enums import (
    DealType,
    OpportunityStage,
    OpportunityStatus,
    DEAL_TYPE_VALUES,
    STAGE_VALUES,
    STATUS_VALUES,
)
from .opportunity import (
    OPPORTUNITY_FIELDS,
    TEXT_FIELDS,
    SEARCHABLE_FIELDS,
    DOCUMENT_FIELDS,
    DEFAULT_DEAL_TYPE,
    DEFAULT_STAGE,
    DEFAULT_STATUS,
    DEFAULT_CONFIDENCE,
)

__all__ = [
    "DealType",
    "OpportunityStage",
    "OpportunityStatus",
    "DEAL_TYPE_VALUES",
    "STAGE_VALUES",
    "STATUS_VALUES",
    "OPPORTUNITY_FIELDS",
    "TEXT_FIELDS",
    "SEARCHABLE_FIELDS",
    "DOCUMENT_FIELDS",
    "DEFAULT_DEAL_TYPE",
    "DEFAULT_STAGE",
    "DEFAULT_STATUS",
    "DEFAULT_CONFIDENCE",
]
