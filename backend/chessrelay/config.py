"""Конфигурация приложения."""
import os
from functools import lru_cache


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": _flag("DEBUG"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "broadcast_interval_ms": int(os.environ.get("BROADCAST_INTERVAL_MS", "400")),
        "session_id_prefix": os.environ.get("SESSION_ID_PREFIX", "game"),
        "push_on_change": _flag("PUSH_ON_CHANGE"),
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "8000")),
    })()
