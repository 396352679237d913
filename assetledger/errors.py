# assetledger/errors.py
"""
Registry error taxonomy.

Every failed registry operation raises exactly one of these. The kind name
and numeric code are stable and are what callers (and the CLI) report.
"""

from typing import Dict, Type


class RegistryError(Exception):
    """Base class for all registry failures."""
    kind: str = "RegistryError"
    code: int = 0

    def __init__(self, message: str = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def __str__(self) -> str:
        if self.message == self.kind:
            return f"{self.kind} (u{self.code})"
        return f"{self.kind} (u{self.code}): {self.message}"


class InsufficientPrivileges(RegistryError):
    """Reserved for administrator-gated operations."""
    kind = "InsufficientPrivileges"
    code = 100


class AssetNotFound(RegistryError):
    kind = "AssetNotFound"
    code = 101


class DuplicateEntry(RegistryError):
    """Reserved for identifier collisions."""
    kind = "DuplicateEntry"
    code = 102


class InvalidParameters(RegistryError):
    kind = "InvalidParameters"
    code = 103


class CapacityExceeded(RegistryError):
    kind = "CapacityExceeded"
    code = 104


class AccessDenied(RegistryError):
    """Reserved."""
    kind = "AccessDenied"
    code = 105


class PermissionDenied(RegistryError):
    kind = "PermissionDenied"
    code = 106


class ContentRestricted(RegistryError):
    kind = "ContentRestricted"
    code = 107


class FormatValidation(RegistryError):
    kind = "FormatValidation"
    code = 108


_ERRORS: Dict[str, Type[RegistryError]] = {
    cls.kind: cls
    for cls in (
        InsufficientPrivileges,
        AssetNotFound,
        DuplicateEntry,
        InvalidParameters,
        CapacityExceeded,
        AccessDenied,
        PermissionDenied,
        ContentRestricted,
        FormatValidation,
    )
}


def error_for_kind(kind: str) -> Type[RegistryError]:
    """Look up an error class by its kind name."""
    try:
        return _ERRORS[kind]
    except KeyError:
        raise ValueError(f"Unknown error kind: {kind}") from None
