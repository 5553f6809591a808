"""Конфигурация приложения."""
import os
from functools import lru_cache


def _flag(name: str) -> bool:
    return os.environ.get(name, "0").lower() in ("1", "true", "yes")


@lru_cache
def get_config():
    debug = _flag("DEBUG")
    return type("Config", (), {
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "3001")),
        "debug": debug,
        "log_level": os.environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO").upper(),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "strict_symbols": _flag("STRICT_SYMBOLS"),
    })()
