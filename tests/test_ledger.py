# tests/test_ledger.py
"""Tests for the reference ledger host."""

import tempfile
from pathlib import Path

import pytest

from assetledger.errors import ContentRestricted
from assetledger.identity import Principal, Transaction, sign_transaction
from assetledger.ledger import Ledger, TransactionRejected
from assetledger.registry import Registry


@pytest.fixture(scope="module")
def admin():
    return Principal.create("admin")


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


@pytest.fixture
def ledger(admin):
    return Ledger(Registry(administrator=admin.address))


ASSET = {"name": "doc", "size_bytes": 100, "description": "x", "tags": ["a"]}


def send(ledger, principal, operation, arguments, nonce=None):
    if nonce is None:
        nonce = ledger.next_nonce(principal.address)
    tx = Transaction.build(principal, operation, arguments, nonce=nonce)
    return ledger.submit(sign_transaction(tx, principal))


class TestSubmit:
    def test_create_mines_block(self, ledger, alice):
        receipt = send(ledger, alice, "create_digital_asset", ASSET)
        assert receipt.committed
        assert receipt.result == 1
        assert receipt.block_height == 1
        assert receipt.sender == alice.address
        assert ledger.block_height == 1

        record = ledger.query(alice.address, "get_asset_information", asset_id=1)
        assert record.owner == alice.address
        assert record.created_at == 1

    def test_created_at_tracks_block(self, ledger, alice):
        send(ledger, alice, "create_digital_asset", ASSET)
        send(ledger, alice, "create_digital_asset", ASSET)
        record = ledger.query(alice.address, "get_asset_information", asset_id=2)
        assert record.created_at == 2

    def test_registry_error_aborts(self, ledger, alice, bob):
        send(ledger, alice, "create_digital_asset", ASSET)
        receipt = send(ledger, bob, "delete_digital_asset", {"asset_id": 1})
        assert not receipt.committed
        assert receipt.error == "PermissionDenied"
        assert receipt.block_height == 2
        assert ledger.next_nonce(bob.address) == 1
        assert ledger.query(bob.address, "get_asset_owner", asset_id=1) == alice.address

    def test_unsigned_rejected(self, ledger, alice):
        tx = Transaction.build(alice, "create_digital_asset", ASSET)
        with pytest.raises(TransactionRejected):
            ledger.submit(tx)
        assert ledger.block_height == 0

    def test_replay_rejected(self, ledger, alice):
        tx = sign_transaction(Transaction.build(alice, "create_digital_asset", ASSET), alice)
        ledger.submit(tx)
        with pytest.raises(TransactionRejected):
            ledger.submit(tx)
        assert ledger.block_height == 1

    def test_read_operation_is_not_a_transaction(self, ledger, alice):
        with pytest.raises(TransactionRejected):
            send(ledger, alice, "get_registry_statistics", {})

    def test_bad_arguments_rejected_before_mining(self, ledger, alice):
        with pytest.raises(TransactionRejected):
            send(ledger, alice, "create_digital_asset", {"name": "doc"})
        assert ledger.block_height == 0
        assert ledger.next_nonce(alice.address) == 0

    def test_non_integer_asset_id_aborts(self, ledger, alice):
        send(ledger, alice, "create_digital_asset", ASSET)
        receipt = send(ledger, alice, "delete_digital_asset", {"asset_id": [1]})
        assert receipt.error == "AssetNotFound"
        assert ledger.block_height == len(ledger.receipts()) == 2
        assert ledger.next_nonce(alice.address) == 2
        assert ledger.query(alice.address, "get_asset_owner", asset_id=1) == alice.address

    def test_unexpected_error_unmines_block(self, ledger, alice, monkeypatch):
        """Only registry errors produce receipts; anything else leaves no block."""
        send(ledger, alice, "create_digital_asset", ASSET)

        def fail(ctx, asset_id):
            raise RuntimeError("storage unavailable")

        monkeypatch.setattr(ledger.registry, "delete_digital_asset", fail)
        with pytest.raises(RuntimeError):
            send(ledger, alice, "delete_digital_asset", {"asset_id": 1})
        assert ledger.block_height == len(ledger.receipts()) == 1
        assert ledger.next_nonce(alice.address) == 1

    def test_transfer_flow(self, ledger, alice, bob):
        send(ledger, alice, "create_digital_asset", ASSET)
        receipt = send(ledger, alice, "transfer_asset_ownership",
                       {"asset_id": 1, "new_owner": bob.address})
        assert receipt.committed

        update = dict(ASSET, asset_id=1, name="renamed")
        assert send(ledger, alice, "update_digital_asset", update).error == "PermissionDenied"
        assert send(ledger, bob, "update_digital_asset", update).committed


class TestQuery:
    def test_read_errors_propagate(self, ledger, alice, bob):
        send(ledger, alice, "create_digital_asset", ASSET)
        with pytest.raises(ContentRestricted):
            ledger.query(bob.address, "get_asset_information", asset_id=1)

    def test_query_does_not_mine(self, ledger, alice, admin):
        stats = ledger.query(alice.address, "get_registry_statistics")
        assert stats.system_administrator == admin.address
        assert ledger.block_height == 0

    def test_mutation_via_query_rejected(self, ledger, alice):
        with pytest.raises(TransactionRejected):
            ledger.query(alice.address, "delete_digital_asset", asset_id=1)


class TestPersistence:
    def test_ledger_state_survives_reload(self, temp_dir, admin, alice, bob):
        ledger = Ledger(Registry(temp_dir, administrator=admin.address), temp_dir)
        send(ledger, alice, "create_digital_asset", ASSET)
        send(ledger, bob, "delete_digital_asset", {"asset_id": 1})

        reloaded = Ledger(Registry(temp_dir), temp_dir)
        assert reloaded.block_height == 2
        assert reloaded.next_nonce(alice.address) == 1
        assert [r.status for r in reloaded.receipts()] == ["committed", "aborted"]

    @pytest.mark.parametrize(
        "content",
        ["{broken", '{"receipts": ["not a receipt"]}', '{"nonces": {"AL00": "x"}}'],
    )
    def test_corrupt_log_raises(self, temp_dir, admin, content):
        """A damaged log must not silently reset nonces."""
        registry = Registry(temp_dir, administrator=admin.address)
        (temp_dir / "ledger.json").write_text(content)
        with pytest.raises(ValueError):
            Ledger(registry, temp_dir)

    def test_replay_rejected_after_reload(self, temp_dir, admin, alice):
        ledger = Ledger(Registry(temp_dir, administrator=admin.address), temp_dir)
        tx = sign_transaction(Transaction.build(alice, "create_digital_asset", ASSET), alice)
        ledger.submit(tx)

        reloaded = Ledger(Registry(temp_dir), temp_dir)
        with pytest.raises(TransactionRejected):
            reloaded.submit(tx)
        assert reloaded.query(alice.address, "get_registry_statistics").total_assets_registered == 1
