"""Configurações da aplicação - carrega variáveis do .env"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",  # carrega local
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # CORE
    # ===========================================
    environment: str = "development"
    database_url: str  # postgresql://... ou sqlite:///caminho.db
    secret_key: str
    access_token_expire_minutes: int = 720  # 12 horas
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    # ===========================================
    # BANCO
    # ===========================================
    database_ssl: bool = False
    pgsslmode: str | None = None

    # ===========================================
    # USUÁRIOS (formato "usuario:senha,usuario2:senha2")
    # ===========================================
    app_users: str = "owner:change-me,partner:change-me-too"

    # ===========================================
    # ARQUIVOS
    # ===========================================
    storage_local_path: str = "./storage"
    max_document_mb: int = 25

    # ===========================================
    # PROPRIEDADES
    # ===========================================
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def use_database_ssl(self) -> bool:
        """SSL no Postgres: flag explícita, PGSSLMODE=require ou Supabase."""
        return bool(
            self.database_ssl
            or self.pgsslmode == "require"
            or "supabase.co" in self.database_url
        )

    @property
    def max_document_bytes(self) -> int:
        return self.max_document_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
