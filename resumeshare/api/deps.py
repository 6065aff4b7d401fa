import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from resumeshare.adapters.clock import SystemClock
from resumeshare.adapters.fs.filestore import FileSystemStore
from resumeshare.adapters.sqlite.repos import (
    SQLiteResumeRepo,
    SQLiteUploadRepo,
    SQLiteViewStore,
)
from resumeshare.api.auth_utils import (
    TokenError,
    TokenExpiredError,
    decode_access_token,
    get_secret_key,
)
from resumeshare.components.analytics import ClientInfo, client_info_from_headers
from resumeshare.components.resumes import Principal
from resumeshare.rules.loader import load_rules
from resumeshare.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("RESUME_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "resumes.db")
        self.uploads_dir = self.data_dir / "uploads"
        self.rules_path = Path(os.environ.get("RESUME_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = Path(
            os.environ.get("RESUME_MIGRATIONS_DIR", self.base_dir / "migrations")
        )
        self.log_level = os.environ.get("RESUME_LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            o.strip() for o in os.environ.get("RESUME_CORS_ORIGINS", "*").split(",") if o.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


class AnalyticsRulesAdapter:
    """Adapter to map generic Rules to the analytics RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.analytics

    def get_unique_window_hours(self) -> int:
        return self._rules.unique_window_hours

    def get_timeseries_days(self) -> int:
        return self._rules.timeseries_days

    def get_default_page_size(self) -> int:
        return self._rules.default_page_size

    def get_max_page_size(self) -> int:
        return self._rules.max_page_size


class ResumeRulesAdapter:
    """Adapter to map generic Rules to the resumes RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.resumes

    def get_default_name(self) -> str:
        return self._rules.default_name

    def get_list_limit(self) -> int:
        return self._rules.list_limit


class UploadRulesAdapter:
    """Adapter to map generic Rules to the uploads RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.uploads

    def get_max_upload_bytes(self) -> int:
        return self._rules.max_upload_bytes

    def get_allowed_extensions(self) -> list[str]:
        return self._rules.allowlist_extensions


def get_analytics_rules(rules: Rules = Depends(get_rules)) -> AnalyticsRulesAdapter:
    return AnalyticsRulesAdapter(rules)


def get_resume_rules(rules: Rules = Depends(get_rules)) -> ResumeRulesAdapter:
    return ResumeRulesAdapter(rules)


def get_upload_rules(rules: Rules = Depends(get_rules)) -> UploadRulesAdapter:
    return UploadRulesAdapter(rules)


# --- Repos ---
def get_view_store(settings: Settings = Depends(get_settings)) -> SQLiteViewStore:
    return SQLiteViewStore(settings.db_path)


def get_resume_repo(settings: Settings = Depends(get_settings)) -> SQLiteResumeRepo:
    return SQLiteResumeRepo(settings.db_path)


def get_upload_repo(settings: Settings = Depends(get_settings)) -> SQLiteUploadRepo:
    return SQLiteUploadRepo(settings.db_path)


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=str(settings.uploads_dir))


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Request metadata ---
def get_client_info(request: Request) -> ClientInfo:
    return client_info_from_headers(
        request.headers, request.client.host if request.client else None
    )


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def principal_from_token(token: str, rules: Rules) -> Principal:
    """Verify a bearer token and build the caller identity from its claims."""
    secret = get_secret_key()
    if secret is None:
        logger.error("ACCESS_TOKEN_SECRET is not defined")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        )

    try:
        payload = decode_access_token(token, secret, algorithm=rules.auth.algorithm)
    except TokenExpiredError as e:
        logger.warning("Token verification failed: expired")
        raise _unauthorized("Token expired") from e
    except TokenError as e:
        logger.warning("Token verification failed: %s", e)
        raise _unauthorized("Invalid token") from e

    user_id = payload.get("id") or payload.get("sub")
    if user_id is None:
        logger.warning("Token verification failed: no id claim")
        raise _unauthorized("Invalid token")

    return Principal(
        id=str(user_id),
        email=payload.get("email"),
        role=payload.get("role") or rules.auth.default_role,
    )


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    rules: Rules = Depends(get_rules),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing or invalid token format")
    return principal_from_token(credentials.credentials, rules)


def get_optional_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    rules: Rules = Depends(get_rules),
) -> Principal | None:
    """Anonymous callers get None; a token that is sent must still verify."""
    if credentials is None or not credentials.credentials:
        return None
    return principal_from_token(credentials.credentials, rules)


def require_admin(
    principal: Principal = Depends(get_current_principal),
    rules: Rules = Depends(get_rules),
) -> Principal:
    if principal.role != rules.auth.admin_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: admins only",
        )
    return principal
