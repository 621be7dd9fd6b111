"""
TESTES - AUTENTICAÇÃO E LOGGING
===============================
"""

import json
import logging

from deal_tracker.infrastructure.logging_config import JSONFormatter, setup_logging
from deal_tracker.infrastructure.services.auth_service import (
    CredentialStore,
    create_access_token,
    decode_access_token,
)


def test_credential_store_parses_config():
    store = CredentialStore.from_config(" owner:change-me , partner:p:with:colons,:nouser,nopass:, broken ,")

    assert store.verify("owner", "change-me") == "owner"
    assert store.verify("partner", "p:with:colons") == "partner"
    assert "nopass" not in store
    assert "broken" not in store
    assert "" not in store


def test_credential_store_rejects_wrong_password():
    store = CredentialStore.from_config("owner:secret")

    assert store.verify("owner", "wrong") is None
    assert store.verify("ghost", "secret") is None
    assert store.verify("", "") is None


def test_token_roundtrip():
    token = create_access_token("owner", "k", expires_minutes=5)

    assert decode_access_token(token, "k")["sub"] == "owner"
    assert decode_access_token(token, "outra-chave") is None
    assert decode_access_token("lixo", "k") is None


def test_expired_token_is_rejected():
    token = create_access_token("owner", "k", expires_minutes=-1)
    assert decode_access_token(token, "k") is None


def test_json_formatter_includes_extras():
    record = logging.makeLogRecord({
        "name": "deal_tracker.test",
        "levelname": "INFO",
        "msg": "Oportunidade %s criada",
        "args": (7,),
        "opportunity_id": 7,
    })

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Oportunidade 7 criada"
    assert payload["level"] == "INFO"
    assert payload["opportunity_id"] == 7


def test_setup_logging_installs_single_json_handler():
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("aiosqlite").level == logging.WARNING
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
