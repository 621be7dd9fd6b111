"""
DEPENDENCIES (Dependências)
============================

Funções que são injetadas nas rotas: storage, serviços e usuário logado.
Os colaboradores (adapter, blob store, credenciais) ficam em app.state,
montados no lifespan.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from deal_tracker.config import Settings, get_settings
from deal_tracker.application.services import DocumentService, OpportunityService, SpreadsheetImporter
from deal_tracker.infrastructure.database import StorageAdapter
from deal_tracker.infrastructure.services import CredentialStore, LocalFileStorage, decode_access_token

# Esquema de autenticação Bearer
security = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> StorageAdapter:
    return request.app.state.storage


def get_blob_store(request: Request) -> LocalFileStorage:
    return request.app.state.blob_store


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credential_store


def get_opportunity_service(
    storage: StorageAdapter = Depends(get_storage),
    blob_store: LocalFileStorage = Depends(get_blob_store),
) -> OpportunityService:
    return OpportunityService(storage, blob_store=blob_store)


def get_document_service(
    storage: StorageAdapter = Depends(get_storage),
    blob_store: LocalFileStorage = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> DocumentService:
    return DocumentService(storage, blob_store, max_bytes=settings.max_document_bytes)


def get_importer(service: OpportunityService = Depends(get_opportunity_service)) -> SpreadsheetImporter:
    return SpreadsheetImporter(service)


def _username_from_token(credentials, settings: Settings, credential_store: CredentialStore):
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials, settings.secret_key)
    if not payload:
        return None
    username = payload.get("sub")
    # Usuário removido do APP_USERS perde o acesso
    if not username or username not in credential_store:
        return None
    return username


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
    credential_store: CredentialStore = Depends(get_credential_store),
) -> str:
    """
    Valida o token e retorna o nome do usuário autenticado.

    Uso nas rotas:
        @router.get("/rota-protegida")
        async def rota(user: str = Depends(get_current_user)):
            ...
    """
    username = _username_from_token(credentials, settings, credential_store)
    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Não autorizado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return username


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings),
    credential_store: CredentialStore = Depends(get_credential_store),
):
    """Igual ao get_current_user, mas retorna None em vez de 401."""
    return _username_from_token(credentials, settings, credential_store)
