# src/dndreg/wire_config.py
from __future__ import annotations
import importlib
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from dndreg.core import log
from dndreg.core.ids import HandlerIdAllocator
from dndreg.core.registry import HandlerRegistry

_DEFAULT_ACTIONS = {"module": "dndreg.adapters.actions", "class": "RecordingActions"}


def _imp(module: str, cls: str):
    mod = importlib.import_module(module)
    return getattr(mod, cls)


def build_from_dict(data: Dict[str, Any] | None) -> Tuple[HandlerRegistry, Any]:
    """Assemble logging, the actions collaborator and a registry from a config mapping."""
    data = data or {}

    log_cfg = data.get("log") or {}
    log.setup(log_cfg.get("level"), log_cfg.get("json"), force=bool(log_cfg))

    act_cfg = {**_DEFAULT_ACTIONS, **(data.get("actions") or {})}
    ActionsCls = _imp(act_cfg["module"], act_cfg["class"])
    actions = ActionsCls(**(act_cfg.get("args") or {}))

    reg_cfg = data.get("registry") or {}
    allocator = HandlerIdAllocator(int(reg_cfg.get("id_start", 0)))
    registry = HandlerRegistry(actions, allocator=allocator, name=reg_cfg.get("name", "registry"))
    log.get("wire").info("registry %s wired to %s.%s", registry.name, act_cfg["module"], act_cfg["class"])
    return registry, actions


def build_from_yaml(yaml_path: str) -> Tuple[HandlerRegistry, Any]:
    """Read a registry YAML file and wire it up."""
    data = yaml.safe_load(Path(yaml_path).read_text(encoding="utf-8"))
    return build_from_dict(data)
