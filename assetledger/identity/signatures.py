# assetledger/identity/signatures.py
"""
Cryptographic signatures for transactions.

Uses RSA PKCS#1 v1.5 with SHA-256 over the digest of the canonical
transaction payload.
"""

import base64
import hashlib
import json
from typing import Any, Dict

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.exceptions import InvalidSignature

from .principal import Principal
from .transaction import Transaction

SIGNATURE_TYPE = "RsaSha256"


def _canonicalize(data: Dict[str, Any]) -> str:
    """
    Canonicalize JSON for signing.

    Sorted keys, no whitespace.
    """
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def _hash_sha256(data: str) -> bytes:
    """Hash string with SHA-256."""
    return hashlib.sha256(data.encode()).digest()


def sign_transaction(tx: Transaction, principal: Principal) -> Transaction:
    """
    Sign a transaction with the principal's private key.

    Args:
        tx: The transaction to sign
        principal: The principal whose key signs it. Must match tx.sender_key.

    Returns:
        Transaction with signature attached
    """
    if tx.sender_key != principal.public_key:
        raise ValueError(f"Transaction sender key does not belong to {principal.name}")

    private_key = serialization.load_pem_private_key(
        principal.private_key,
        password=None,
    )

    digest = _hash_sha256(_canonicalize(tx.payload()))
    signature_bytes = private_key.sign(
        digest,
        padding.PKCS1v15(),
        hashes.SHA256(),
    )

    tx.signature = {
        "type": SIGNATURE_TYPE,
        "signatureValue": base64.b64encode(signature_bytes).decode("utf-8"),
    }
    return tx


def verify_transaction(tx: Transaction) -> bool:
    """
    Verify a transaction's signature against its embedded sender key.

    Returns:
        True if signature is valid
    """
    if not tx.signature:
        return False

    try:
        public_key = serialization.load_pem_public_key(tx.sender_key)
        if tx.signature["type"] != SIGNATURE_TYPE:
            return False

        digest = _hash_sha256(_canonicalize(tx.payload()))
        signature_bytes = base64.b64decode(tx.signature["signatureValue"])
        public_key.verify(
            signature_bytes,
            digest,
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return True

    except (InvalidSignature, KeyError, ValueError, TypeError):
        return False
