# assetledger/registry/registry.py
"""
The asset registry.

Combines the asset store and the access list behind the public operation
set. Every operation receives a CallContext from the host; the registry
trusts the caller and block height it carries.

Mutating operations are all-or-nothing: state is snapshotted before the
operation and restored if anything raises. When a state directory is
configured the registry is persisted only after a commit.

Structure:
    state_dir/
        registry.json     # Assets, access list, counter, administrator
"""

import json
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import InvalidParameters, PermissionDenied, ContentRestricted
from ..validation import is_principal
from .access import AccessControl, AccessStatus
from .store import AssetRecord, AssetStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallContext:
    """
    Per-call facts supplied by the execution environment.

    Attributes:
        caller: Principal making the call
        block_height: Current block (sequence) number
    """
    caller: str
    block_height: int = 0


@dataclass(frozen=True)
class RegistryStatistics:
    total_assets_registered: int
    system_administrator: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_assets_registered": self.total_assets_registered,
            "system_administrator": self.system_administrator,
        }


class Registry:
    """
    Single-ledger registry of digital asset metadata.

    Example:
        registry = Registry(administrator="ALADMIN")
        ctx = CallContext(caller="ALICE", block_height=7)
        asset_id = registry.create_digital_asset(ctx, "doc", 100, "x", ["a"])
    """

    MUTATING_OPERATIONS = (
        "create_digital_asset",
        "update_digital_asset",
        "transfer_asset_ownership",
        "delete_digital_asset",
    )
    READ_OPERATIONS = (
        "get_asset_information",
        "verify_access_status",
        "get_asset_owner",
        "get_registry_statistics",
    )

    def __init__(self, state_dir: Optional[Path | str] = None, administrator: Optional[str] = None):
        """
        Initialize the registry.

        Args:
            state_dir: Optional directory to persist registry state in
            administrator: Principal recorded as system administrator.
                Ignored when existing state is loaded from state_dir.
        """
        self.state_dir = Path(state_dir) if state_dir else None
        self._store = AssetStore()
        self._access = AccessControl()
        self._administrator: Optional[str] = None

        if self.state_dir is not None:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            self._load()

        if self._administrator is None:
            if not is_principal(administrator):
                raise ValueError("A well-formed administrator principal is required")
            self._administrator = administrator
            self._save()
        elif administrator and administrator != self._administrator:
            logger.debug(
                f"Keeping stored administrator {self._administrator}, ignoring {administrator}"
            )

    def _index_path(self) -> Optional[Path]:
        if self.state_dir is None:
            return None
        return self.state_dir / "registry.json"

    def _load(self):
        """Load registry from disk."""
        index_path = self._index_path()
        if not index_path.exists():
            return
        try:
            with open(index_path) as f:
                data = json.load(f)
            store = AssetStore.from_dict(data)
            access = AccessControl.from_list(data.get("access", []))
            administrator = data["administrator"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValueError(f"Corrupt registry state at {index_path}: {e}") from e
        self._store = store
        self._access = access
        self._administrator = administrator

    def _save(self):
        """Save registry to disk."""
        index_path = self._index_path()
        if index_path is None:
            return
        data = {
            "version": "1.0",
            "administrator": self._administrator,
            **self._store.to_dict(),
            "access": self._access.to_list(),
        }
        tmp_path = index_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, index_path)
        finally:
            tmp_path.unlink(missing_ok=True)

    @contextmanager
    def _atomic(self, operation: str):
        """Run a mutation so it either commits fully or leaves no trace."""
        store_snapshot = self._store.snapshot()
        access_snapshot = self._access.snapshot()
        try:
            yield
            self._save()
        except BaseException as e:
            self._store.restore(store_snapshot)
            self._access.restore(access_snapshot)
            logger.debug(f"{operation} rolled back: {e}")
            raise
        logger.debug(f"{operation} committed")

    def _require_owner(self, ctx: CallContext, asset_id: int) -> AssetRecord:
        record = self._store.require(asset_id)
        if ctx.caller != record.owner:
            raise PermissionDenied(f"{ctx.caller} does not own asset {asset_id}")
        return record

    # Asset store operations

    def create_digital_asset(
        self,
        ctx: CallContext,
        name: str,
        size_bytes: int,
        description: str,
        tags: List[str],
    ) -> int:
        """
        Register a new asset owned by the caller.

        The caller also receives an explicit read grant; this is the only
        grant ever created implicitly.

        Returns:
            The new asset_id
        """
        with self._atomic("create_digital_asset"):
            record = self._store.create(
                owner=ctx.caller,
                created_at=ctx.block_height,
                name=name,
                size_bytes=size_bytes,
                description=description,
                tags=tags,
            )
            self._access.set_read(record.asset_id, ctx.caller, True)
        return record.asset_id

    def update_digital_asset(
        self,
        ctx: CallContext,
        asset_id: int,
        name: str,
        size_bytes: int,
        description: str,
        tags: List[str],
    ) -> bool:
        """Replace an asset's content fields. Owner only."""
        with self._atomic("update_digital_asset"):
            self._require_owner(ctx, asset_id)
            self._store.update(asset_id, name, size_bytes, description, tags)
        return True

    def transfer_asset_ownership(self, ctx: CallContext, asset_id: int, new_owner: str) -> bool:
        """
        Hand an asset to another principal. Owner only.

        Access entries are left exactly as they were.
        """
        with self._atomic("transfer_asset_ownership"):
            self._require_owner(ctx, asset_id)
            if not is_principal(new_owner):
                raise InvalidParameters("new_owner is not a well-formed principal")
            self._store.set_owner(asset_id, new_owner)
        return True

    def delete_digital_asset(self, ctx: CallContext, asset_id: int) -> bool:
        """Remove an asset permanently. Owner only."""
        with self._atomic("delete_digital_asset"):
            self._require_owner(ctx, asset_id)
            self._store.remove(asset_id)
        return True

    # Read path

    def get_asset_information(self, ctx: CallContext, asset_id: int) -> AssetRecord:
        """
        Return a copy of an asset's record.

        Readable by the owner or by any principal with an enabled grant.
        """
        record = self._store.require(asset_id)
        if not self._access.status(asset_id, ctx.caller, record.owner).can_read_asset:
            raise ContentRestricted(f"{ctx.caller} may not read asset {asset_id}")
        return record.copy()

    def verify_access_status(self, ctx: CallContext, asset_id: int, principal: str) -> AccessStatus:
        """Report whether principal can read asset_id. Open to any caller."""
        record = self._store.require(asset_id)
        return self._access.status(asset_id, principal, record.owner)

    def get_asset_owner(self, ctx: CallContext, asset_id: int) -> str:
        return self._store.require(asset_id).owner

    def get_registry_statistics(self, ctx: CallContext = None) -> RegistryStatistics:
        """Cumulative creation count and the administrator."""
        return RegistryStatistics(
            total_assets_registered=self._store.last_asset_id,
            system_administrator=self._administrator,
        )

    @property
    def administrator(self) -> str:
        return self._administrator

    def __contains__(self, asset_id: int) -> bool:
        return asset_id in self._store

    def __len__(self) -> int:
        """Number of live assets."""
        return len(self._store)
