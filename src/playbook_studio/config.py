# src/playbook_studio/config.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env")

def _split_list(val: str | None) -> list[str]:
    if not val:
        return []
    return [p.strip() for p in val.split(",") if p.strip()]

def cors_origins_from_env() -> list[str]:
    return _split_list(os.getenv("CORS_ALLOW_ORIGINS")) or ["*"]

@dataclass
class Settings:
    # === MongoDB (required first) ===
    mongo_workflow_url: str

    mongo_workflow_db: str = "workflow_db"
    mongo_workflow_collection: str = "workflows"

    # === HTTP API (CORS origins are read at import, see cors_origins_from_env) ===
    api_host: str = "127.0.0.1"
    api_port: int = 8787

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        mongo_url = os.getenv("MONGO_WORKFLOW_URL") or ""
        if not mongo_url:
            raise RuntimeError("Missing required settings: MongoDB workflow URL (MONGO_WORKFLOW_URL)")

        return cls(
            mongo_workflow_url=mongo_url,
            mongo_workflow_db=os.getenv("MONGO_WORKFLOW_DB", "workflow_db"),
            mongo_workflow_collection=os.getenv("MONGO_WORKFLOW_COLLECTION", "workflows"),
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("API_PORT", "8787")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def load(cls) -> "Settings":
        return cls.from_env()


@dataclass
class ClientSettings:
    """Settings for the terminal client (API location, shared password, presentation)."""
    password: str
    api_base_url: str = "http://127.0.0.1:8787"
    layout: str = "table"
    theme: str = "light"
    load_latest_when_no_id: bool = False

    @classmethod
    def from_env(cls) -> "ClientSettings":
        password = os.getenv("STUDIO_PASSWORD") or ""
        if not password:
            raise RuntimeError("Missing required settings: shared password (STUDIO_PASSWORD)")

        layout = os.getenv("STUDIO_LAYOUT", "table").lower()
        if layout not in {"table", "card"}:
            raise RuntimeError(f"Unsupported STUDIO_LAYOUT '{layout}' (expected table or card)")
        theme = os.getenv("STUDIO_THEME", "light").lower()
        if theme not in {"light", "dark"}:
            raise RuntimeError(f"Unsupported STUDIO_THEME '{theme}' (expected light or dark)")

        return cls(
            password=password,
            api_base_url=os.getenv("STUDIO_API_URL", "http://127.0.0.1:8787").rstrip("/"),
            layout=layout,
            theme=theme,
            load_latest_when_no_id=os.getenv("STUDIO_LOAD_LATEST", "false").lower() in {"1", "true", "yes"},
        )

    @classmethod
    def load(cls) -> "ClientSettings":
        return cls.from_env()
