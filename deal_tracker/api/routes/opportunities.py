"""
ROTAS: OPPORTUNITIES
====================

Endpoints:
- GET /opportunities - Lista com busca e filtros (q, stage, status, owner, deal_type)
- POST /opportunities - Cria oportunidade
- GET /opportunities/{id} - Busca oportunidade por ID
- PUT /opportunities/{id} - Atualiza (merge + sanitização completa)
- DELETE /opportunities/{id} - Remove (documentos caem junto)
- GET /summary - Contagem por status + pipeline aberto
- POST /import-xlsx - Importa planilha de fornecedores
"""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, Response, UploadFile, status

from deal_tracker.api.dependencies import get_current_user, get_importer, get_opportunity_service
from deal_tracker.api.errors import internal_error
from deal_tracker.api.schemas.schemas import (
    ImportResponse,
    OpportunityListResponse,
    OpportunityResponse,
    SummaryResponse,
)
from deal_tracker.application.services import OpportunityService, SpreadsheetImporter
from deal_tracker.domain.errors import NotFoundError, ValidationError
from deal_tracker.domain.services.query_builder import SearchCriteria

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Opportunities"])


# =============================================
# ENDPOINTS
# =============================================

@router.get("/opportunities", response_model=OpportunityListResponse)
async def list_opportunities(
    q: str = "",
    stage: str = "",
    status_value: str = Query("", alias="status"),
    owner: str = "",
    deal_type: str = "",
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        criteria = SearchCriteria(q=q, stage=stage, status=status_value, owner=owner, deal_type=deal_type)
        return {"data": await service.list(criteria)}
    except Exception as e:
        raise internal_error("Erro ao listar oportunidades", e)


@router.post("/opportunities", response_model=OpportunityResponse, status_code=status.HTTP_201_CREATED)
async def create_opportunity(
    payload: Dict[str, Any] = Body(default_factory=dict),
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        return await service.create(payload, acting_user=user)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao criar oportunidade", e)


@router.get("/opportunities/{opportunity_id}", response_model=OpportunityResponse)
async def get_opportunity(
    opportunity_id: int,
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        return await service.get(opportunity_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao buscar oportunidade", e)


@router.put("/opportunities/{opportunity_id}", response_model=OpportunityResponse)
async def update_opportunity(
    opportunity_id: int,
    payload: Dict[str, Any] = Body(default_factory=dict),
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        return await service.update(opportunity_id, payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao atualizar oportunidade", e)


@router.delete("/opportunities/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_opportunity(
    opportunity_id: int,
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        await service.remove(opportunity_id)
        logger.info(f"Oportunidade {opportunity_id} removida por {user}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao remover oportunidade", e)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    user: str = Depends(get_current_user),
    service: OpportunityService = Depends(get_opportunity_service),
):
    try:
        return await service.summarize()
    except Exception as e:
        raise internal_error("Erro ao carregar resumo", e)


@router.post("/import-xlsx", response_model=ImportResponse)
async def import_xlsx(
    file: Optional[UploadFile] = File(None),
    user: str = Depends(get_current_user),
    importer: SpreadsheetImporter = Depends(get_importer),
):
    if file is None:
        raise HTTPException(status_code=400, detail="Envie um arquivo .xlsx no campo \"file\"")

    try:
        data = await file.read()
        result = await importer.import_workbook(data, acting_user=user)
        return result.to_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise internal_error("Falha na importação", e)
