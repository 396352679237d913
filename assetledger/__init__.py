# assetledger - Owned digital asset metadata registry with read access control
#
# A single-ledger registry where every asset record has exactly one owner
# principal, plus a per-asset, per-principal read access list.
#
# Core concepts:
# - Registry: Asset store + access list behind an atomic operation set
# - CallContext: Caller identity and block height supplied by the host
# - Ledger: Reference host that verifies signed transactions and mines blocks
# - Principal: A signing identity whose address is the caller identity

from .errors import (
    RegistryError,
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
from .registry import Registry, CallContext, AssetRecord, AccessStatus, RegistryStatistics
from .identity import Principal, IdentityStore, Transaction, sign_transaction, verify_transaction
from .ledger import Ledger, Receipt, TransactionRejected
from .config import LedgerConfig

__all__ = [
    # Errors
    "RegistryError",
    "InsufficientPrivileges",
    "AssetNotFound",
    "DuplicateEntry",
    "InvalidParameters",
    "CapacityExceeded",
    "AccessDenied",
    "PermissionDenied",
    "ContentRestricted",
    "FormatValidation",
    # Core
    "Registry",
    "CallContext",
    "AssetRecord",
    "AccessStatus",
    "RegistryStatistics",
    # Host
    "Principal",
    "IdentityStore",
    "Transaction",
    "sign_transaction",
    "verify_transaction",
    "Ledger",
    "Receipt",
    "TransactionRejected",
    "LedgerConfig",
]

__version__ = "0.1.0"
