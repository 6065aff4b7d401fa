from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException

from resumeshare.api.auth_utils import (
    SECRET_ENV_VAR,
    TokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
)
from resumeshare.api.deps import principal_from_token
from resumeshare.rules.models import Rules

SECRET = "unit-secret"


def test_token_round_trip() -> None:
    token = create_access_token({"id": "u1", "role": "admin"}, SECRET)

    claims = decode_access_token(token, SECRET)

    assert claims["id"] == "u1"
    assert claims["role"] == "admin"
    assert "exp" in claims


def test_expiry_from_supplied_clock() -> None:
    issued = datetime(2024, 1, 1, tzinfo=UTC)
    token = create_access_token(
        {"id": "u1"}, SECRET, expires_delta=timedelta(minutes=5), now_utc=issued
    )

    with pytest.raises(TokenExpiredError):
        decode_access_token(token, SECRET)


def test_wrong_secret() -> None:
    token = create_access_token({"id": "u1"}, SECRET)

    with pytest.raises(TokenError):
        decode_access_token(token, "other-secret")


def test_garbage_token() -> None:
    with pytest.raises(TokenError):
        decode_access_token("abc.def.ghi", SECRET)


class TestPrincipalFromToken:
    def test_claims_mapped(self, rules: Rules, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SECRET_ENV_VAR, SECRET)
        token = create_access_token({"id": "u1", "email": "u1@example.com"}, SECRET)

        principal = principal_from_token(token, rules)

        assert principal.id == "u1"
        assert principal.email == "u1@example.com"
        assert principal.role == "user"
        assert principal.is_admin is False

    def test_sub_claim_accepted(self, rules: Rules, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SECRET_ENV_VAR, SECRET)
        token = create_access_token({"sub": "u2", "role": "admin"}, SECRET)

        principal = principal_from_token(token, rules)

        assert principal.id == "u2"
        assert principal.is_admin is True

    def test_missing_id_claim(self, rules: Rules, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SECRET_ENV_VAR, SECRET)
        token = create_access_token({"email": "x@example.com"}, SECRET)

        with pytest.raises(HTTPException) as exc:
            principal_from_token(token, rules)

        assert exc.value.status_code == 401

    def test_secret_not_configured(self, rules: Rules, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SECRET_ENV_VAR, raising=False)

        with pytest.raises(HTTPException) as exc:
            principal_from_token("anything", rules)

        assert exc.value.status_code == 500
        assert exc.value.detail == "Server configuration error"
