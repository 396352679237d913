# assetledger/identity/__init__.py
"""
Identity and signed transactions for the reference ledger.

Core concepts:
- Principal: A named identity with an RSA key pair
- Address: The caller identity derived from a principal's public key
- Transaction: A request to run one registry operation
- Signature: Proof that the key holder sent the transaction
"""

from .principal import Principal, IdentityStore, address_from_public_key
from .transaction import Transaction
from .signatures import sign_transaction, verify_transaction

__all__ = [
    "Principal",
    "IdentityStore",
    "address_from_public_key",
    "Transaction",
    "sign_transaction",
    "verify_transaction",
]
