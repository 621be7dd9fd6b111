"""
SERVIÇO DE AUTENTICAÇÃO
========================

Usuários vêm da configuração (APP_USERS="usuario:senha,usuario2:senha2")
e são injetados na aplicação como CredentialStore. Tokens JWT carregam o
nome do usuário em "sub".
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import hmac
import logging
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

# Configurações JWT
ALGORITHM = "HS256"


class CredentialStore:
    """Consulta de credenciais (usuário -> senha)."""

    def __init__(self, users: Dict[str, str]):
        self._users = dict(users)

    @classmethod
    def from_config(cls, raw: str) -> "CredentialStore":
        """
        Lê pares "usuario:senha" separados por vírgula.

        Entradas sem ":" ou com usuário/senha vazios são ignoradas.
        """
        users: Dict[str, str] = {}
        for entry in (raw or "").split(","):
            entry = entry.strip()
            split_at = entry.find(":")
            if split_at < 1:
                continue
            username = entry[:split_at].strip()
            password = entry[split_at + 1:].strip()
            if not username or not password:
                continue
            users[username] = password

        if not users:
            logger.warning("Nenhum usuário válido em APP_USERS")
        return cls(users)

    def verify(self, username: str, password: str) -> Optional[str]:
        """Retorna o nome do usuário se a senha confere."""
        expected = self._users.get((username or "").strip())
        if expected is None:
            return None
        if hmac.compare_digest(expected.encode(), (password or "").encode()):
            return username.strip()
        return None

    def __contains__(self, username: str) -> bool:
        return username in self._users


def create_access_token(username: str, secret_key: str, expires_minutes: int) -> str:
    """
    Cria token JWT.

    Args:
        username: Usuário autenticado (vai no "sub")
        secret_key: Chave de assinatura
        expires_minutes: Tempo de expiração

    Returns:
        Token JWT assinado
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": username, "exp": expire}, secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> Optional[dict]:
    """
    Decodifica e valida token JWT.

    Returns:
        Dados do token ou None se inválido
    """
    try:
        return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
