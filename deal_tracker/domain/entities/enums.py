"""Enums - valores fixos que se repetem no sistema."""

from enum import Enum


class DealType(str, Enum):
    """Tipo da oportunidade."""
    SUPPLIER_OFFER = "supplier_offer"  # Fornecedor ofertando produto
    CUSTOMER_NEED = "customer_need"    # Cliente procurando produto
    MATCHED_DEAL = "matched_deal"      # Oferta e demanda casadas


class OpportunityStage(str, Enum):
    """Posição da oportunidade no pipeline."""
    SOURCING = "sourcing"
    QUOTED = "quoted"
    SAMPLED = "sampled"
    NEGOTIATING = "negotiating"
    COMMITTED = "committed"
    WON = "won"
    LOST = "lost"


class OpportunityStatus(str, Enum):
    """Resultado macro da oportunidade."""
    OPEN = "open"
    WON = "won"
    LOST = "lost"


# Conjuntos fechados usados na normalização e nos filtros
DEAL_TYPE_VALUES = frozenset(item.value for item in DealType)
STAGE_VALUES = frozenset(item.value for item in OpportunityStage)
STATUS_VALUES = frozenset(item.value for item in OpportunityStatus)
