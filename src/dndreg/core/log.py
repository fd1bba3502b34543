# src/dndreg/core/log.py
from __future__ import annotations

import logging
import os
import sys
import json
from typing import Optional

_configured = False


def _maybe_load_dotenv() -> None:
    try:
        # Optional: pick up LOG_LEVEL / LOG_JSON from .env
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv()


class JsonHandler(logging.StreamHandler):
    """One JSON object per line on stdout."""
    def __init__(self):
        super().__init__(stream=sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            obj = {
                "ts": record.created,
                "lvl": record.levelname,
                "name": record.name,
                "msg": record.getMessage(),
            }
            for k in ("filename", "lineno", "funcName"):
                obj[k] = getattr(record, k, None)
            if record.exc_info:
                obj["exc"] = self.format(record).splitlines()[-1]
            self.stream.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")
            self.flush()
        except Exception:  # pragma: no cover
            self.handleError(record)


def _resolve_level(name: str) -> int:
    lvl = logging.getLevelName(name.upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def setup(level: Optional[str] = None, json_mode: Optional[bool] = None, *, force: bool = False) -> None:
    """Configure the root logger.

    - LOG_LEVEL / LOG_JSON are read from the environment when args are None
    - a second call is a no-op unless force=True
    """
    global _configured
    if _configured and not force:
        return

    _maybe_load_dotenv()

    py_level = _resolve_level(level or os.getenv("LOG_LEVEL", "INFO"))
    json_flag = json_mode if json_mode is not None else (os.getenv("LOG_JSON", "0") == "1")

    root = logging.getLogger()
    # pytest may call setup() repeatedly
    root.handlers.clear()
    root.setLevel(py_level)

    if json_flag:
        handler = JsonHandler()
    else:
        fmt = "[%(asctime)s] %(levelname)s %(name)s | %(message)s"
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=fmt))
    root.addHandler(handler)

    _configured = True


def get(name: str) -> logging.Logger:
    """Namespaced logger under ``dndreg``."""
    if name != "dndreg" and not name.startswith("dndreg."):
        name = f"dndreg.{name}"
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Adjust the root level at runtime (handy in tests)."""
    logging.getLogger().setLevel(_resolve_level(level))
