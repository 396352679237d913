# assetledger/registry/store.py
"""
Asset store: the authoritative map of asset records.

The store owns the identifier counter. Identifiers are assigned
sequentially from 1 and never reused, so a deleted id stays retired.
Authorization is not decided here; the registry checks ownership before
calling the mutators.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..errors import AssetNotFound, DuplicateEntry
from ..validation import validate_asset_fields

logger = logging.getLogger(__name__)


@dataclass
class AssetRecord:
    """
    Metadata for one registered digital asset.

    Attributes:
        asset_id: Sequential identifier (starts at 1)
        name: Display name, 1-64 bytes
        owner: Principal holding exclusive mutation rights
        size_bytes: Declared content size, 1 <= size < 1e9
        created_at: Block height at creation (immutable)
        description: Free text, 1-128 bytes
        tags: 1-10 tags of 1-32 bytes each
    """
    asset_id: int
    name: str
    owner: str
    size_bytes: int
    created_at: int
    description: str
    tags: List[str] = field(default_factory=list)

    def copy(self) -> "AssetRecord":
        return replace(self, tags=list(self.tags))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset_id": self.asset_id,
            "name": self.name,
            "owner": self.owner,
            "size_bytes": self.size_bytes,
            "created_at": self.created_at,
            "description": self.description,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetRecord":
        return cls(
            asset_id=int(data["asset_id"]),
            name=data["name"],
            owner=data["owner"],
            size_bytes=int(data["size_bytes"]),
            created_at=int(data["created_at"]),
            description=data["description"],
            tags=list(data.get("tags", [])),
        )


class AssetStore:
    """In-memory asset map plus the monotonic identifier counter."""

    def __init__(self):
        self._records: Dict[int, AssetRecord] = {}
        self._last_id = 0

    @property
    def last_asset_id(self) -> int:
        """Last identifier handed out (cumulative creations)."""
        return self._last_id

    def get(self, asset_id: int) -> Optional[AssetRecord]:
        return self._records.get(asset_id)

    def require(self, asset_id: int) -> AssetRecord:
        """Get a record or raise AssetNotFound."""
        if isinstance(asset_id, bool) or not isinstance(asset_id, int):
            raise AssetNotFound(f"asset id must be an integer, got {asset_id!r}")
        record = self._records.get(asset_id)
        if record is None:
            raise AssetNotFound(f"asset {asset_id} does not exist")
        return record

    def create(
        self,
        owner: str,
        created_at: int,
        name: str,
        size_bytes: int,
        description: str,
        tags: List[str],
    ) -> AssetRecord:
        """
        Validate fields and insert a new record under the next identifier.

        Raises:
            InvalidParameters, CapacityExceeded, FormatValidation: bad fields
        """
        name, size_bytes, description, tags = validate_asset_fields(
            name, size_bytes, description, tags
        )
        new_id = self._last_id + 1
        if new_id in self._records:
            raise DuplicateEntry(f"asset {new_id} already exists")

        record = AssetRecord(
            asset_id=new_id,
            name=name,
            owner=owner,
            size_bytes=size_bytes,
            created_at=created_at,
            description=description,
            tags=tags,
        )
        self._records[new_id] = record
        self._last_id = new_id
        logger.debug(f"Created asset {new_id} for {owner}")
        return record

    def update(
        self,
        asset_id: int,
        name: str,
        size_bytes: int,
        description: str,
        tags: List[str],
    ) -> AssetRecord:
        """Replace the content fields of an existing record."""
        record = self.require(asset_id)
        name, size_bytes, description, tags = validate_asset_fields(
            name, size_bytes, description, tags
        )
        record.name = name
        record.size_bytes = size_bytes
        record.description = description
        record.tags = tags
        return record

    def set_owner(self, asset_id: int, new_owner: str) -> AssetRecord:
        record = self.require(asset_id)
        record.owner = new_owner
        return record

    def remove(self, asset_id: int) -> AssetRecord:
        """Remove a record permanently. The id is never reissued."""
        record = self.require(asset_id)
        del self._records[asset_id]
        return record

    def snapshot(self) -> Dict[str, Any]:
        """Capture full state for rollback."""
        return {
            "records": {k: v.copy() for k, v in self._records.items()},
            "last_id": self._last_id,
        }

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._records = snapshot["records"]
        self._last_id = snapshot["last_id"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_asset_id": self._last_id,
            "assets": {str(k): v.to_dict() for k, v in self._records.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetStore":
        store = cls()
        store._records = {
            int(k): AssetRecord.from_dict(v)
            for k, v in data.get("assets", {}).items()
        }
        store._last_id = int(data.get("last_asset_id", 0))
        if store._records and max(store._records) > store._last_id:
            raise ValueError("asset identifier exceeds recorded counter")
        return store

    def __contains__(self, asset_id: int) -> bool:
        return asset_id in self._records

    def __len__(self) -> int:
        return len(self._records)
