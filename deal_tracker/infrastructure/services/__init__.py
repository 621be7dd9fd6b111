"""Serviços de infraestrutura."""

from .auth_service import CredentialStore, create_access_token, decode_access_token
from .storage_service import LocalFileStorage

__all__ = [
    "CredentialStore",
    "create_access_token",
    "decode_access_token",
    "LocalFileStorage",
]
