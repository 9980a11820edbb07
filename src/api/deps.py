import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.fs.filestore import FileSystemStore, LocalFileUrls
from src.adapters.links.regenerator import AssetLinkRegenerator
from src.adapters.oembed.client import OEmbedClient
from src.adapters.probe.remote import HttpRemoteProbe
from src.adapters.sqlite.repos import SQLiteFileRepo, SQLitePageRepo, SQLiteUserRepo
from src.api.auth_utils import decode_access_token
from src.components.editor import EditorConfigRegistry, EditorFieldSettings
from src.components.media import MediaConfig
from src.components.toolbar import HtmlEditorToolbar, ToolbarSettings
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.shell.hooks.editor_hooks import EditorHooks


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("EDITOR_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "editor.db")
        self.assets_dir = self.data_dir / "assets"
        self.rules_path = Path(os.environ.get("EDITOR_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = self.base_dir / "migrations"
        self.base_url = os.environ.get("EDITOR_BASE_URL", "http://localhost:8000/")
        self.assets_url = "/assets"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_media_config(rules: Rules = Depends(get_rules)) -> MediaConfig:
    return MediaConfig.from_rules(rules.media)


def get_field_settings(rules: Rules = Depends(get_rules)) -> EditorFieldSettings:
    return EditorFieldSettings.from_rules(rules.editor)


def get_editor_registry(rules: Rules = Depends(get_rules)) -> EditorConfigRegistry:
    return EditorConfigRegistry.from_rules(rules.editor)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_file_repo(settings: Settings = Depends(get_settings)) -> SQLiteFileRepo:
    return SQLiteFileRepo(settings.db_path)


def get_page_repo(settings: Settings = Depends(get_settings)) -> SQLitePageRepo:
    return SQLitePageRepo(settings.db_path)


# --- Adapters ---
def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=str(settings.assets_dir))


def get_file_urls(
    settings: Settings = Depends(get_settings),
    store: FileSystemStore = Depends(get_file_store),
) -> LocalFileUrls:
    return LocalFileUrls(store, base_url=settings.assets_url)


def get_embed_lookup(rules: Rules = Depends(get_rules)) -> OEmbedClient:
    return OEmbedClient.from_rules(rules.embeds)


# Remote probe singleton; owns one httpx connection pool for the app lifetime
_remote_probe_instance: HttpRemoteProbe | None = None


def get_remote_probe(rules: Rules = Depends(get_rules)) -> HttpRemoteProbe:
    global _remote_probe_instance
    if _remote_probe_instance is None:
        _remote_probe_instance = HttpRemoteProbe(timeout=rules.embeds.timeout_seconds)
    return _remote_probe_instance


def close_remote_probe() -> None:
    """Close the shared probe; the next get_remote_probe() builds a new one."""
    global _remote_probe_instance
    if _remote_probe_instance is not None:
        _remote_probe_instance.close()
        _remote_probe_instance = None


def get_link_regenerator(
    settings: Settings = Depends(get_settings),
    files: SQLiteFileRepo = Depends(get_file_repo),
    urls: LocalFileUrls = Depends(get_file_urls),
) -> AssetLinkRegenerator:
    return AssetLinkRegenerator(files, urls, base_url=settings.assets_url)


# Hooks registry singleton; integrators register hooks on it at startup
_hooks_instance: EditorHooks | None = None


def get_hooks() -> EditorHooks:
    global _hooks_instance
    if _hooks_instance is None:
        _hooks_instance = EditorHooks()
    return _hooks_instance


# --- Services ---
def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


def get_toolbar_settings(settings: Settings = Depends(get_settings)) -> ToolbarSettings:
    return ToolbarSettings(controller_link="/admin", name="editor", base_url=settings.base_url)


def get_toolbar(
    files: SQLiteFileRepo = Depends(get_file_repo),
    urls: LocalFileUrls = Depends(get_file_urls),
    pages: SQLitePageRepo = Depends(get_page_repo),
    embeds: OEmbedClient = Depends(get_embed_lookup),
    probe: HttpRemoteProbe = Depends(get_remote_probe),
    config: MediaConfig = Depends(get_media_config),
    settings: ToolbarSettings = Depends(get_toolbar_settings),
    hooks: EditorHooks = Depends(get_hooks),
) -> HtmlEditorToolbar:
    return HtmlEditorToolbar(
        files=files,
        urls=urls,
        pages=pages,
        embeds=embeds,
        probe=probe,
        config=config,
        settings=settings,
        hooks=hooks,
    )


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user_optional(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User | None:
    """
    The authenticated user, or None for anonymous requests.

    A token that is present but invalid is rejected rather than treated as
    anonymous.
    """
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    if not token:
        return None

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user = user_repo.get_by_id(UUID(user_id))
    except ValueError:
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != "active":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    return user


def require_editor(
    user: User | None = Depends(get_current_user_optional),
    policy: PolicyEngine = Depends(get_policy),
) -> User | None:
    """Gate for the editor endpoints (editor:use)."""
    if not policy.can_use_editor(user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED if user is None else status.HTTP_403_FORBIDDEN,
            detail="Editor access required",
        )
    return user
