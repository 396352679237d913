# assetledger/ledger.py
"""
Reference execution environment for the registry.

The ledger supplies what the registry takes on trust: the caller identity
(derived from a verified transaction signature) and the block height.
Each accepted transaction is mined into its own block. Registry failures
abort the transaction but it still occupies its block and consumes the
sender's nonce, matching how a chain records failed calls.

Structure:
    state_dir/
        ledger.json       # Block height, nonces, receipt log
"""

import inspect
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import RegistryError
from .identity import Transaction, verify_transaction
from .registry import CallContext, Registry

logger = logging.getLogger(__name__)

COMMITTED = "committed"
ABORTED = "aborted"


class TransactionRejected(Exception):
    """The ledger refused a transaction before running it."""


@dataclass
class Receipt:
    """
    Outcome of one mined transaction.

    Attributes:
        tx_id: Transaction identifier
        block_height: Block the transaction was mined into
        sender: Caller address
        operation: Registry operation run
        status: committed|aborted
        result: Operation return value (committed only)
        error: Error kind (aborted only)
    """
    tx_id: str
    block_height: int
    sender: str
    operation: str
    status: str
    result: Any = None
    error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.status == COMMITTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tx_id": self.tx_id,
            "block_height": self.block_height,
            "sender": self.sender,
            "operation": self.operation,
            "status": self.status,
            "result": self.result,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Receipt":
        return cls(
            tx_id=data["tx_id"],
            block_height=data["block_height"],
            sender=data["sender"],
            operation=data["operation"],
            status=data["status"],
            result=data.get("result"),
            error=data.get("error"),
        )


class Ledger:
    """
    Serializes transactions against a registry.

    Example:
        ledger = Ledger(Registry(administrator=admin.address))
        tx = sign_transaction(Transaction.build(alice, "create_digital_asset", {...}), alice)
        receipt = ledger.submit(tx)
    """

    def __init__(self, registry: Registry, state_dir: Optional[Path | str] = None):
        self.registry = registry
        self.state_dir = Path(state_dir) if state_dir else None
        self._block_height = 0
        self._nonces: Dict[str, int] = {}
        self._receipts: List[Receipt] = []
        if self.state_dir is not None:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            self._load()

    def _log_path(self) -> Optional[Path]:
        if self.state_dir is None:
            return None
        return self.state_dir / "ledger.json"

    def _load(self):
        """Load ledger state from disk."""
        log_path = self._log_path()
        if log_path.exists():
            try:
                with open(log_path) as f:
                    data = json.load(f)
                block_height = int(data.get("block_height", 0))
                nonces = {str(k): int(v) for k, v in data.get("nonces", {}).items()}
                receipts = [Receipt.from_dict(r) for r in data.get("receipts", [])]
            except (json.JSONDecodeError, KeyError, TypeError, AttributeError, ValueError) as e:
                raise ValueError(f"Corrupt ledger state at {log_path}: {e}") from e
            self._block_height = block_height
            self._nonces = nonces
            self._receipts = receipts

    def _save(self):
        """Save ledger state to disk."""
        log_path = self._log_path()
        if log_path is None:
            return
        data = {
            "version": "1.0",
            "block_height": self._block_height,
            "nonces": self._nonces,
            "receipts": [r.to_dict() for r in self._receipts],
        }
        tmp_path = log_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, log_path)
        finally:
            tmp_path.unlink(missing_ok=True)

    @property
    def block_height(self) -> int:
        return self._block_height

    def next_nonce(self, address: str) -> int:
        """Nonce the next transaction from address must carry."""
        return self._nonces.get(address, 0)

    def receipts(self) -> List[Receipt]:
        return list(self._receipts)

    def _bind(self, operation: str, ctx: CallContext, arguments: Dict[str, Any]):
        method = getattr(self.registry, operation)
        try:
            inspect.signature(method).bind(ctx, **arguments)
        except TypeError as e:
            raise TransactionRejected(f"Bad arguments for {operation}: {e}") from e
        return method

    def submit(self, tx: Transaction) -> Receipt:
        """
        Verify, mine and run a signed transaction.

        Raises:
            TransactionRejected: bad signature, stale nonce, unknown
                operation or arguments that do not fit the operation
        """
        if not verify_transaction(tx):
            logger.warning(f"Rejected {tx.tx_id}: invalid signature")
            raise TransactionRejected("Invalid transaction signature")

        sender = tx.sender
        if tx.operation not in Registry.MUTATING_OPERATIONS:
            logger.warning(f"Rejected {tx.tx_id}: {tx.operation} is not a transaction")
            raise TransactionRejected(f"Unknown operation: {tx.operation}")

        expected = self.next_nonce(sender)
        if tx.nonce != expected:
            logger.warning(f"Rejected {tx.tx_id}: nonce {tx.nonce}, expected {expected}")
            raise TransactionRejected(f"Bad nonce {tx.nonce}, expected {expected}")

        height = self._block_height + 1
        ctx = CallContext(caller=sender, block_height=height)
        method = self._bind(tx.operation, ctx, tx.arguments)

        previous_nonces = dict(self._nonces)
        self._block_height = height
        self._nonces[sender] = expected + 1
        try:
            result = method(ctx, **tx.arguments)
        except RegistryError as e:
            receipt = Receipt(
                tx_id=tx.tx_id,
                block_height=height,
                sender=sender,
                operation=tx.operation,
                status=ABORTED,
                error=e.kind,
            )
        except Exception:
            # No receipt for this block; unmine it
            self._block_height = height - 1
            self._nonces = previous_nonces
            logger.warning(f"Unmined {tx.tx_id}: {tx.operation} raised unexpectedly")
            raise
        else:
            receipt = Receipt(
                tx_id=tx.tx_id,
                block_height=height,
                sender=sender,
                operation=tx.operation,
                status=COMMITTED,
                result=result,
            )

        self._receipts.append(receipt)
        self._save()
        logger.debug(f"Block {height}: {tx.operation} by {sender} {receipt.status}")
        return receipt

    def query(self, caller: str, operation: str, **arguments) -> Any:
        """Run a read-only operation at the current height."""
        if operation not in Registry.READ_OPERATIONS:
            raise TransactionRejected(f"Not a read-only operation: {operation}")
        ctx = CallContext(caller=caller, block_height=self._block_height)
        method = self._bind(operation, ctx, arguments)
        return method(ctx, **arguments)
