"""
SCHEMAS DA API
==============

Formatos de entrada e saída. A entrada de oportunidades é livre (dict):
quem normaliza é o sanitizer, não o Pydantic.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict


# =============================================
# AUTH
# =============================================

class LoginInput(BaseModel):
    """Input de login."""
    username: str = ""
    password: str = ""


class UserInfo(BaseModel):
    username: str


class TokenResponse(BaseModel):
    """Resposta do login."""
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class MeResponse(BaseModel):
    user: Optional[UserInfo] = None


# =============================================
# OPORTUNIDADES
# =============================================

class OpportunityResponse(BaseModel):
    """Oportunidade como gravada no banco."""
    model_config = ConfigDict(extra="allow")

    id: int
    deal_type: str
    supplier: str
    product: str
    customer: Optional[str] = ""
    qty_needed: Optional[float] = None
    supplier_price: Optional[float] = None
    target_sell_price: Optional[float] = None
    incoterms: Optional[str] = ""
    country_of_origin: Optional[str] = ""
    intermediary: Optional[str] = ""
    deal_contacts: Optional[str] = ""
    stage: str
    status: str
    confidence: int
    owner: Optional[str] = ""
    notes: Optional[str] = ""
    euc_text: Optional[str] = ""
    next_action: Optional[str] = ""
    created_at: str
    updated_at: str


class OpportunityListResponse(BaseModel):
    data: List[OpportunityResponse]


class SummaryResponse(BaseModel):
    open: int
    won: int
    lost: int
    total_pipeline: float


class ImportResponse(BaseModel):
    imported: int
    rows_read: int
    sheet: str


# =============================================
# DOCUMENTOS
# =============================================

class DocumentResponse(BaseModel):
    """Metadados de documento (sem os bytes)."""
    id: int
    opportunity_id: int
    original_name: str
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    uploaded_by: Optional[str] = None
    created_at: str


class DocumentListResponse(BaseModel):
    data: List[DocumentResponse]
