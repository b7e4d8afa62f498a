import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapters.sqlite.repos import SQLiteCrossingRepo
from src.adapters.time_local import LocalTimeAdapter
from src.api.auth_utils import DEV_SECRET_KEY, decode_access_token
from src.components.crossings import CrossingService
from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("TRACKER_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "tracker.db")
        self.rules_path = Path(os.environ.get("TRACKER_RULES_PATH", self.base_dir / "rules.yaml"))
        self.secret_key = os.environ.get("TRACKER_SECRET_KEY", DEV_SECRET_KEY)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def load_cached_rules(rules_path: Path) -> Rules:
    return load_rules(rules_path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_cached_rules(settings.rules_path)


# --- Time ---
def get_time_port(rules: Rules = Depends(get_rules)) -> LocalTimeAdapter:
    return LocalTimeAdapter(rules.presence.timezone)


# --- Repos ---
def get_crossing_repo(settings: Settings = Depends(get_settings)) -> SQLiteCrossingRepo:
    return SQLiteCrossingRepo(settings.db_path)


# --- Component Services ---
def get_crossing_service(
    repo: SQLiteCrossingRepo = Depends(get_crossing_repo),
    time_port: LocalTimeAdapter = Depends(get_time_port),
) -> CrossingService:
    """Get crossings component service."""
    return CrossingService(repo=repo, clock=time_port)


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials, settings.secret_key)
    if not payload or not isinstance(payload.get("email"), str):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        )

    return User(
        id=str(payload.get("sub", "")),
        email=payload["email"],
        name=str(payload.get("name") or "User"),
        picture=payload.get("picture"),
    )
