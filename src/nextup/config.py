# src/nextup/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from the environment outside this module.
- Plain PORT is honoured so the service runs unchanged on PaaS hosts.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "NEXTUP"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Connector flags ----
    http_enabled: bool
    console_enabled: bool

    # ---- HTTP ----
    host: str
    port: int

    # ---- Persistence ----
    data_file: Path
    save_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "nextup")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        http_enabled = _env_bool(_k("HTTP_ENABLED"), True)
        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), False)

        host = _env(_k("HOST"), "127.0.0.1")
        port_raw = _first_env(_k("PORT"), "PORT", default="8080") or "8080"
        try:
            port = int(port_raw)
        except ValueError:
            port = 8080

        data_file = _env_path(_k("DATA_FILE"), Path(".local/nextup/tasks.json"))
        log_dir = _env_path(_k("LOG_DIR"), data_file.parent)
        save_interval_seconds = _env_float(_k("SAVE_INTERVAL_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            http_enabled=http_enabled,
            console_enabled=console_enabled,
            host=host,
            port=port,
            data_file=data_file,
            save_interval_seconds=save_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
