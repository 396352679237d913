# tests/test_identity.py
"""Tests for principals, identity storage and transaction signatures."""

import tempfile
from pathlib import Path

import pytest

from assetledger.identity import (
    IdentityStore,
    Principal,
    Transaction,
    address_from_public_key,
    sign_transaction,
    verify_transaction,
)


@pytest.fixture(scope="module")
def alice():
    return Principal.create("alice")


@pytest.fixture(scope="module")
def bob():
    return Principal.create("bob")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestPrincipal:
    def test_address_format(self, alice):
        address = alice.address
        assert address.startswith("AL")
        assert len(address) == 42
        int(address[2:], 16)

    def test_address_is_stable(self, alice):
        assert address_from_public_key(alice.public_key) == alice.address

    def test_distinct_keys_distinct_addresses(self, alice, bob):
        assert alice.address != bob.address

    def test_dict_roundtrip(self, alice):
        restored = Principal.from_dict(alice.to_dict())
        assert restored == alice
        assert restored.address == alice.address


class TestIdentityStore:
    def test_create_and_reload(self, temp_dir):
        store = IdentityStore(temp_dir)
        carol = store.create("carol")
        assert "carol" in store
        assert len(store) == 1

        reloaded = IdentityStore(temp_dir)
        assert reloaded.get("carol").address == carol.address

    def test_duplicate_name_rejected(self, temp_dir):
        store = IdentityStore(temp_dir)
        store.create("carol")
        with pytest.raises(ValueError):
            store.create("carol")

    def test_resolve(self, temp_dir):
        store = IdentityStore(temp_dir)
        carol = store.create("carol")
        assert store.resolve("carol") == carol.address
        assert store.resolve("ALUNKNOWN") == "ALUNKNOWN"
        assert store.find_by_address(carol.address) is carol
        assert store.find_by_address("ALUNKNOWN") is None


class TestSignatures:
    def make_tx(self, principal, **arguments):
        return Transaction.build(principal, "delete_digital_asset", arguments or {"asset_id": 1})

    def test_sign_and_verify(self, alice):
        tx = sign_transaction(self.make_tx(alice), alice)
        assert tx.signature["type"] == "RsaSha256"
        assert verify_transaction(tx)
        assert tx.sender == alice.address

    def test_unsigned_fails(self, alice):
        assert not verify_transaction(self.make_tx(alice))

    def test_tampered_arguments_fail(self, alice):
        tx = sign_transaction(self.make_tx(alice), alice)
        tx.arguments["asset_id"] = 2
        assert not verify_transaction(tx)

    def test_tampered_nonce_fails(self, alice):
        tx = sign_transaction(self.make_tx(alice), alice)
        tx.nonce = 5
        assert not verify_transaction(tx)

    def test_swapped_sender_key_fails(self, alice, bob):
        tx = sign_transaction(self.make_tx(alice), alice)
        tx.sender_key = bob.public_key
        assert not verify_transaction(tx)

    def test_cannot_sign_for_another_key(self, alice, bob):
        with pytest.raises(ValueError):
            sign_transaction(self.make_tx(alice), bob)

    def test_garbage_signature_fails(self, alice):
        tx = self.make_tx(alice)
        tx.signature = {"type": "RsaSha256", "signatureValue": "not base64!!"}
        assert not verify_transaction(tx)

    def test_roundtrip_keeps_signature_valid(self, alice):
        tx = sign_transaction(self.make_tx(alice), alice)
        restored = Transaction.from_dict(tx.to_dict())
        assert verify_transaction(restored)
