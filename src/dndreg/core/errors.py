# src/dndreg/core/errors.py
from __future__ import annotations

from typing import Optional

__all__ = [
    "RegistryError",
    "InvalidTypeError",
    "ContractError",
    "InvalidHandlerIdError",
    "UnknownHandlerError",
    "PinError",
]


class RegistryError(Exception):
    """Base for every precondition failure raised by the registry."""


class InvalidTypeError(RegistryError, TypeError):
    pass


class ContractError(RegistryError, TypeError):
    def __init__(self, capability: str, message: Optional[str] = None):
        self.capability = capability
        super().__init__(message or f"Expected {capability} to be callable.")


class InvalidHandlerIdError(RegistryError, ValueError):
    pass


class UnknownHandlerError(RegistryError, LookupError):
    pass


class PinError(RegistryError):
    pass
