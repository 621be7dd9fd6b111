"""
ROTAS: AUTH
===========

- POST /auth/login - Troca usuário/senha por token JWT
- GET /auth/me - Usuário do token (ou null)
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from deal_tracker.config import Settings, get_settings
from deal_tracker.api.dependencies import get_credential_store, get_optional_user
from deal_tracker.api.schemas.schemas import LoginInput, MeResponse, TokenResponse, UserInfo
from deal_tracker.infrastructure.services import CredentialStore, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginInput,
    settings: Settings = Depends(get_settings),
    credential_store: CredentialStore = Depends(get_credential_store),
):
    username = credential_store.verify(data.username, data.password)
    if not username:
        logger.warning(f"Login falhou para '{data.username.strip()}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário ou senha inválidos",
        )

    token = create_access_token(username, settings.secret_key, settings.access_token_expire_minutes)
    return TokenResponse(access_token=token, user=UserInfo(username=username))


@router.get("/me", response_model=MeResponse)
async def me(username=Depends(get_optional_user)):
    return MeResponse(user=UserInfo(username=username) if username else None)
