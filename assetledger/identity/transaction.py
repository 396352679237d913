# assetledger/identity/transaction.py
"""
Transactions: signed requests to run one registry operation.

The sender is identified by the public key embedded in the transaction,
so the ledger can derive the caller without trusting any claimed name.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .principal import Principal, address_from_public_key


def _generate_id() -> str:
    """Generate unique transaction ID."""
    return str(uuid.uuid4())


@dataclass
class Transaction:
    """
    A request to run a registry operation.

    Attributes:
        tx_id: Unique identifier
        operation: Registry operation name (e.g., "create_digital_asset")
        arguments: Keyword arguments for the operation
        sender_key: PEM-encoded public key of the sender
        nonce: Sender's sequence number, prevents replay
        signature: Cryptographic signature (added after signing)
    """
    tx_id: str
    operation: str
    arguments: Dict[str, Any]
    sender_key: bytes
    nonce: int = 0
    signature: Optional[Dict[str, Any]] = None

    @property
    def sender(self) -> str:
        """Address of the sending principal."""
        return address_from_public_key(self.sender_key)

    def payload(self) -> Dict[str, Any]:
        """Signed content: everything except the signature."""
        return {
            "id": self.tx_id,
            "operation": self.operation,
            "arguments": self.arguments,
            "sender_key": self.sender_key.decode("utf-8"),
            "nonce": self.nonce,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage."""
        return {
            "tx_id": self.tx_id,
            "operation": self.operation,
            "arguments": self.arguments,
            "sender_key": self.sender_key.decode("utf-8"),
            "nonce": self.nonce,
            "signature": self.signature,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Deserialize from storage."""
        return cls(
            tx_id=data["tx_id"],
            operation=data["operation"],
            arguments=data.get("arguments", {}),
            sender_key=data["sender_key"].encode("utf-8"),
            nonce=data.get("nonce", 0),
            signature=data.get("signature"),
        )

    @classmethod
    def build(
        cls,
        principal: Principal,
        operation: str,
        arguments: Dict[str, Any] = None,
        nonce: int = 0,
    ) -> "Transaction":
        """Create an unsigned transaction from a principal."""
        return cls(
            tx_id=_generate_id(),
            operation=operation,
            arguments=dict(arguments or {}),
            sender_key=principal.public_key,
            nonce=nonce,
        )
