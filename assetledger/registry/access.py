# assetledger/registry/access.py
"""
Per-asset, per-principal read access list.

Only read visibility lives here. A missing entry means no grant; lookups
return None in that case and callers decide the default.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class AccessEntry:
    """An explicit read-permission flag for one (asset, principal) pair."""
    asset_id: int
    principal: str
    read_enabled: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset_id": self.asset_id,
            "principal": self.principal,
            "read_enabled": self.read_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessEntry":
        return cls(
            asset_id=int(data["asset_id"]),
            principal=data["principal"],
            read_enabled=bool(data["read_enabled"]),
        )


@dataclass(frozen=True)
class AccessStatus:
    """Result of an access check for one principal on one asset."""
    has_granted_access: bool
    is_asset_owner: bool

    @property
    def can_read_asset(self) -> bool:
        return self.has_granted_access or self.is_asset_owner

    def to_dict(self) -> Dict[str, bool]:
        return {
            "has_granted_access": self.has_granted_access,
            "is_asset_owner": self.is_asset_owner,
            "can_read_asset": self.can_read_asset,
        }


class AccessControl:
    """Keyed map of (asset_id, principal) -> read_enabled."""

    def __init__(self):
        self._entries: Dict[Tuple[int, str], bool] = {}

    def lookup(self, asset_id: int, principal: str) -> Optional[bool]:
        """Return the stored flag, or None if no entry exists."""
        return self._entries.get((asset_id, principal))

    def set_read(self, asset_id: int, principal: str, enabled: bool) -> None:
        self._entries[(asset_id, principal)] = enabled
        logger.debug(f"Read access on asset {asset_id} for {principal}: {enabled}")

    def has_read(self, asset_id: int, principal: str) -> bool:
        granted = self.lookup(asset_id, principal)
        return granted if granted is not None else False

    def status(self, asset_id: int, principal: str, owner: str) -> AccessStatus:
        return AccessStatus(
            has_granted_access=self.has_read(asset_id, principal),
            is_asset_owner=principal == owner,
        )

    def entries(self) -> List[AccessEntry]:
        return [
            AccessEntry(asset_id=asset_id, principal=principal, read_enabled=enabled)
            for (asset_id, principal), enabled in self._entries.items()
        ]

    def snapshot(self) -> Dict[Tuple[int, str], bool]:
        return dict(self._entries)

    def restore(self, snapshot: Dict[Tuple[int, str], bool]) -> None:
        self._entries = snapshot

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries()]

    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> "AccessControl":
        acl = cls()
        for item in data:
            entry = AccessEntry.from_dict(item)
            acl._entries[(entry.asset_id, entry.principal)] = entry.read_enabled
        return acl

    def __len__(self) -> int:
        return len(self._entries)
