# assetledger/registry/__init__.py
"""
Asset registry core.

The registry maps sequential asset identifiers to metadata records owned
by a single principal, with a read-access list layered on top.

Example:
    registry = Registry(administrator="ALADMIN")
    ctx = CallContext(caller="ALALICE", block_height=1)
    asset_id = registry.create_digital_asset(ctx, "doc", 100, "x", ["a"])
    registry.get_asset_information(ctx, asset_id)
"""

from .access import AccessControl, AccessEntry, AccessStatus
from .registry import CallContext, Registry, RegistryStatistics
from .store import AssetRecord, AssetStore

__all__ = [
    "AccessControl",
    "AccessEntry",
    "AccessStatus",
    "AssetRecord",
    "AssetStore",
    "CallContext",
    "Registry",
    "RegistryStatistics",
]
