"""
OPPORTUNITY
===========

Campos canônicos de uma oportunidade e de um documento anexado.

Os registros circulam como dicts planos (mesmo formato do JSON da API);
aqui ficam apenas os nomes e os valores padrão.
"""

from .enums import DealType, OpportunityStage, OpportunityStatus

# Campos editáveis (sem id e timestamps, que são do serviço)
OPPORTUNITY_FIELDS = (
    "deal_type",
    "supplier",
    "product",
    "customer",
    "qty_needed",
    "supplier_price",
    "target_sell_price",
    "incoterms",
    "country_of_origin",
    "intermediary",
    "deal_contacts",
    "stage",
    "status",
    "confidence",
    "owner",
    "notes",
    "euc_text",
    "next_action",
)

# Campos texto livre (trim, padrão "")
TEXT_FIELDS = (
    "supplier",
    "product",
    "customer",
    "incoterms",
    "country_of_origin",
    "intermediary",
    "deal_contacts",
    "owner",
    "notes",
    "euc_text",
    "next_action",
)

# Campos onde o filtro de texto livre procura
SEARCHABLE_FIELDS = (
    "supplier",
    "product",
    "customer",
    "notes",
    "euc_text",
    "next_action",
    "deal_contacts",
)

DEFAULT_DEAL_TYPE = DealType.SUPPLIER_OFFER.value
DEFAULT_STAGE = OpportunityStage.SOURCING.value
DEFAULT_STATUS = OpportunityStatus.OPEN.value
DEFAULT_CONFIDENCE = 50

# Metadados de documento expostos na API (sem o storage_key)
DOCUMENT_FIELDS = (
    "id",
    "opportunity_id",
    "original_name",
    "mime_type",
    "size_bytes",
    "uploaded_by",
    "created_at",
)
