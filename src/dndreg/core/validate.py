from __future__ import annotations

import enum
from typing import Any, Iterable

from dndreg.core.contracts import SOURCE_CAPABILITIES, TARGET_CAPABILITIES
from dndreg.core.errors import ContractError, InvalidTypeError


def _require_callables(handler: Any, names: Iterable[str]) -> None:
    for name in names:
        if not callable(getattr(handler, name, None)):
            raise ContractError(name)


def validate_source_contract(source: Any) -> None:
    _require_callables(source, SOURCE_CAPABILITIES)


def validate_target_contract(target: Any) -> None:
    _require_callables(target, TARGET_CAPABILITIES)


def validate_type(type_: Any, allow_array: bool = False) -> None:
    """Accept a str or an Enum member; with allow_array, a flat list/tuple of them."""
    if allow_array and isinstance(type_, (list, tuple)):
        for t in type_:
            validate_type(t, False)
        return

    if isinstance(type_, (str, enum.Enum)):
        return
    if allow_array:
        raise InvalidTypeError("Type can only be a string, a symbol, or a sequence of either.")
    raise InvalidTypeError("Type can only be a string or a symbol.")
