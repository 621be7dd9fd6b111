"""
ROTAS: DOCUMENTS
================

- GET /opportunities/{id}/documents - Lista anexos
- POST /opportunities/{id}/documents - Envia anexo (multipart "file")
- GET /documents/{id}/download - Baixa anexo
- DELETE /documents/{id} - Remove anexo
"""

import logging
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from deal_tracker.api.dependencies import get_current_user, get_document_service
from deal_tracker.api.errors import internal_error
from deal_tracker.api.schemas.schemas import DocumentListResponse, DocumentResponse
from deal_tracker.application.services import DocumentService
from deal_tracker.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])


@router.get("/opportunities/{opportunity_id}/documents", response_model=DocumentListResponse)
async def list_documents(
    opportunity_id: int,
    user: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        return {"data": await service.list_documents(opportunity_id)}
    except Exception as e:
        raise internal_error("Erro ao listar documentos", e)


@router.post(
    "/opportunities/{opportunity_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    opportunity_id: int,
    file: Optional[UploadFile] = File(None),
    user: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        data = await file.read() if file is not None else b""
        return await service.attach(
            opportunity_id,
            filename=file.filename if file is not None else "",
            mime_type=file.content_type if file is not None else "",
            data=data,
            uploaded_by=user,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Falha no envio do documento", e)


@router.get("/documents/{document_id}/download")
async def download_document(
    document_id: int,
    user: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        document, data = await service.download(document_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao baixar documento", e)

    return Response(
        content=data,
        media_type=document.get("mime_type") or "application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename=\"{quote(document['original_name'])}\""},
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    user: str = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service),
):
    try:
        await service.delete(document_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise internal_error("Erro ao remover documento", e)
