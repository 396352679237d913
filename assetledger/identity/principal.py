# assetledger/identity/principal.py
"""
Principal identities.

A principal is an identity with:
- A local name (e.g., "alice")
- RSA key pair for signing transactions
- An address derived from the public key, used as the caller identity
"""

import hashlib
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

ADDRESS_PREFIX = "AL"


def _generate_keypair() -> tuple[bytes, bytes]:
    """Generate RSA key pair for signing."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


def address_from_public_key(public_key_pem: bytes) -> str:
    """
    Derive a principal address from a PEM public key.

    The address is the prefix followed by the first 20 bytes of the
    SHA3-256 digest of the DER-encoded key, upper-case hex.
    """
    public_key = serialization.load_pem_public_key(public_key_pem)
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return ADDRESS_PREFIX + hashlib.sha3_256(der).hexdigest()[:40].upper()


@dataclass
class Principal:
    """
    A named signing identity.

    Attributes:
        name: Local name (e.g., "alice")
        public_key: PEM-encoded public key
        private_key: PEM-encoded private key (kept secret)
        created_at: Timestamp of creation
    """
    name: str
    public_key: bytes
    private_key: bytes
    created_at: float = field(default_factory=time.time)

    @property
    def address(self) -> str:
        """Caller identity presented to the registry."""
        return address_from_public_key(self.public_key)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage."""
        return {
            "name": self.name,
            "public_key": self.public_key.decode("utf-8"),
            "private_key": self.private_key.decode("utf-8"),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Principal":
        """Deserialize from storage."""
        return cls(
            name=data["name"],
            public_key=data["public_key"].encode("utf-8"),
            private_key=data["private_key"].encode("utf-8"),
            created_at=data.get("created_at", time.time()),
        )

    @classmethod
    def create(cls, name: str) -> "Principal":
        """Create a new principal with generated keys."""
        private_pem, public_pem = _generate_keypair()
        return cls(
            name=name,
            public_key=public_pem,
            private_key=private_pem,
        )


class IdentityStore:
    """
    Persistent storage for named principals.

    Structure:
        store_dir/
            identities.json   # Names, keys and creation times
    """

    def __init__(self, store_dir: Path | str):
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)
        self._principals: Dict[str, Principal] = {}
        self._load()

    def _index_path(self) -> Path:
        return self.store_dir / "identities.json"

    def _load(self):
        """Load identities from disk."""
        index_path = self._index_path()
        if index_path.exists():
            with open(index_path) as f:
                data = json.load(f)
            self._principals = {
                name: Principal.from_dict(principal_data)
                for name, principal_data in data.get("identities", {}).items()
            }

    def _save(self):
        """Save identities to disk."""
        data = {
            "version": "1.0",
            "identities": {
                name: principal.to_dict()
                for name, principal in self._principals.items()
            },
        }
        with open(self._index_path(), "w") as f:
            json.dump(data, f, indent=2)

    def create(self, name: str) -> Principal:
        """Create and store a new principal."""
        if name in self._principals:
            raise ValueError(f"Identity {name} already exists")

        principal = Principal.create(name)
        self._principals[name] = principal
        self._save()
        return principal

    def get(self, name: str) -> Optional[Principal]:
        """Get a principal by name."""
        return self._principals.get(name)

    def find_by_address(self, address: str) -> Optional[Principal]:
        for principal in self._principals.values():
            if principal.address == address:
                return principal
        return None

    def resolve(self, name_or_address: str) -> str:
        """Map a known name to its address; anything else passes through."""
        principal = self._principals.get(name_or_address)
        return principal.address if principal else name_or_address

    def list(self) -> list[Principal]:
        """List all principals."""
        return list(self._principals.values())

    def __contains__(self, name: str) -> bool:
        return name in self._principals

    def __len__(self) -> int:
        return len(self._principals)
