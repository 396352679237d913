#!/usr/bin/env python3
"""
Asset Ledger CLI

Command-line interface to a local asset registry:
  assetledger init - Create the administrator identity and registry
  assetledger identity - Manage signing identities
  assetledger create|update|transfer|delete - Signed mutations
  assetledger info|access|owner|stats - Read-only queries
  assetledger log - Show transaction receipts

Usage:
  assetledger init --admin <name>
  assetledger create --as <name> --name <n> --size <bytes> --description <d> --tag <t>
  assetledger info <asset_id> --as <name|address>
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import LedgerConfig
from .errors import RegistryError, error_for_kind
from .identity import IdentityStore, Transaction, sign_transaction
from .ledger import Ledger, TransactionRejected
from .registry import Registry


class CLIError(Exception):
    """Usage problem reported to the user without a traceback."""


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _open_ledger(state_dir: Path) -> tuple[IdentityStore, Ledger]:
    if not (state_dir / "registry.json").exists():
        raise CLIError(f"No registry at {state_dir}; run 'assetledger init' first")
    identities = IdentityStore(state_dir)
    registry = Registry(state_dir)
    return identities, Ledger(registry, state_dir)


def _submit(state_dir: Path, sender: str, operation: str, arguments: Dict[str, Any]) -> int:
    """Sign and submit one transaction as the named identity."""
    identities, ledger = _open_ledger(state_dir)
    principal = identities.get(sender)
    if principal is None:
        raise CLIError(f"Unknown identity: {sender}")

    tx = Transaction.build(
        principal,
        operation,
        arguments,
        nonce=ledger.next_nonce(principal.address),
    )
    receipt = ledger.submit(sign_transaction(tx, principal))

    if not receipt.committed:
        code = error_for_kind(receipt.error).code
        print(f"Error: {receipt.error} (u{code})", file=sys.stderr)
        return 1

    _print_json(receipt.to_dict())
    return 0


def _query(state_dir: Path, caller: Optional[str], operation: str, **arguments) -> Any:
    identities, ledger = _open_ledger(state_dir)
    caller_address = identities.resolve(caller) if caller else ledger.registry.administrator
    return ledger.query(caller_address, operation, **arguments)


def _content_arguments(args) -> Dict[str, Any]:
    return {
        "name": args.name,
        "size_bytes": args.size,
        "description": args.description,
        "tags": list(args.tag or []),
    }


def cmd_init(args, config: LedgerConfig) -> int:
    """Create the administrator identity and initialize the registry."""
    state_dir = config.state_dir
    identities = IdentityStore(state_dir)
    admin_name = args.admin or config.administrator

    admin = identities.get(admin_name)
    if admin is None:
        admin = identities.create(admin_name)
        print(f"Created identity {admin_name}: {admin.address}", file=sys.stderr)

    if (state_dir / "registry.json").exists():
        print(f"Registry already initialized at {state_dir}", file=sys.stderr)
    registry = Registry(state_dir, administrator=admin.address)
    _print_json(registry.get_registry_statistics().to_dict())
    return 0


def cmd_identity(args, config: LedgerConfig) -> int:
    identities = IdentityStore(config.state_dir)
    if args.identity_command == "create":
        try:
            principal = identities.create(args.name)
        except ValueError as e:
            raise CLIError(str(e)) from e
        _print_json({"name": principal.name, "address": principal.address})
    else:
        _print_json([
            {"name": p.name, "address": p.address}
            for p in identities.list()
        ])
    return 0


def cmd_create(args, config: LedgerConfig) -> int:
    return _submit(config.state_dir, args.as_name, "create_digital_asset", _content_arguments(args))


def cmd_update(args, config: LedgerConfig) -> int:
    arguments = {"asset_id": args.asset_id, **_content_arguments(args)}
    return _submit(config.state_dir, args.as_name, "update_digital_asset", arguments)


def cmd_transfer(args, config: LedgerConfig) -> int:
    identities = IdentityStore(config.state_dir)
    arguments = {"asset_id": args.asset_id, "new_owner": identities.resolve(args.to)}
    return _submit(config.state_dir, args.as_name, "transfer_asset_ownership", arguments)


def cmd_delete(args, config: LedgerConfig) -> int:
    return _submit(config.state_dir, args.as_name, "delete_digital_asset", {"asset_id": args.asset_id})


def cmd_info(args, config: LedgerConfig) -> int:
    record = _query(config.state_dir, args.as_name, "get_asset_information", asset_id=args.asset_id)
    _print_json(record.to_dict())
    return 0


def cmd_access(args, config: LedgerConfig) -> int:
    identities = IdentityStore(config.state_dir)
    status = _query(
        config.state_dir,
        None,
        "verify_access_status",
        asset_id=args.asset_id,
        principal=identities.resolve(args.principal),
    )
    _print_json(status.to_dict())
    return 0


def cmd_owner(args, config: LedgerConfig) -> int:
    owner = _query(config.state_dir, None, "get_asset_owner", asset_id=args.asset_id)
    _print_json({"asset_id": args.asset_id, "owner": owner})
    return 0


def cmd_stats(args, config: LedgerConfig) -> int:
    stats = _query(config.state_dir, None, "get_registry_statistics")
    _print_json(stats.to_dict())
    return 0


def cmd_log(args, config: LedgerConfig) -> int:
    _, ledger = _open_ledger(config.state_dir)
    _print_json([r.to_dict() for r in ledger.receipts()])
    return 0


def _add_content_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--as", dest="as_name", required=True, help="Sending identity name")
    parser.add_argument("--name", required=True, help="Asset name (1-64 bytes)")
    parser.add_argument("--size", type=int, required=True, help="Size in bytes")
    parser.add_argument("--description", required=True, help="Description (1-128 bytes)")
    parser.add_argument("--tag", action="append", help="Tag (repeat for several)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetledger",
        description="Asset Ledger - owned digital asset metadata registry",
    )
    parser.add_argument("--state", help="State directory (overrides config)")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # init command
    init_parser = subparsers.add_parser("init", help="Initialize the registry")
    init_parser.add_argument("--admin", help="Administrator identity name")

    # identity commands
    identity_parser = subparsers.add_parser("identity", help="Manage identities")
    identity_sub = identity_parser.add_subparsers(dest="identity_command", required=True)
    identity_create = identity_sub.add_parser("create", help="Create an identity")
    identity_create.add_argument("name", help="Identity name")
    identity_sub.add_parser("list", help="List identities")

    # mutations
    create_parser = subparsers.add_parser("create", help="Register an asset")
    _add_content_arguments(create_parser)

    update_parser = subparsers.add_parser("update", help="Replace an asset's content fields")
    update_parser.add_argument("asset_id", type=int)
    _add_content_arguments(update_parser)

    transfer_parser = subparsers.add_parser("transfer", help="Transfer ownership")
    transfer_parser.add_argument("asset_id", type=int)
    transfer_parser.add_argument("--as", dest="as_name", required=True, help="Current owner")
    transfer_parser.add_argument("--to", required=True, help="New owner name or address")

    delete_parser = subparsers.add_parser("delete", help="Delete an asset")
    delete_parser.add_argument("asset_id", type=int)
    delete_parser.add_argument("--as", dest="as_name", required=True, help="Owner identity")

    # queries
    info_parser = subparsers.add_parser("info", help="Show an asset record")
    info_parser.add_argument("asset_id", type=int)
    info_parser.add_argument("--as", dest="as_name", required=True, help="Reader name or address")

    access_parser = subparsers.add_parser("access", help="Check a principal's read access")
    access_parser.add_argument("asset_id", type=int)
    access_parser.add_argument("--principal", required=True, help="Name or address")

    owner_parser = subparsers.add_parser("owner", help="Show an asset's owner")
    owner_parser.add_argument("asset_id", type=int)

    subparsers.add_parser("stats", help="Registry statistics")
    subparsers.add_parser("log", help="Transaction receipts")

    return parser


COMMANDS = {
    "init": cmd_init,
    "identity": cmd_identity,
    "create": cmd_create,
    "update": cmd_update,
    "transfer": cmd_transfer,
    "delete": cmd_delete,
    "info": cmd_info,
    "access": cmd_access,
    "owner": cmd_owner,
    "stats": cmd_stats,
    "log": cmd_log,
}


def main(argv: List[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = LedgerConfig.from_file(args.config) if args.config else LedgerConfig()
    if args.state:
        config.state_dir = Path(args.state)
    logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args, config)
    except RegistryError as e:
        print(f"Error: {e.kind} (u{e.code})", file=sys.stderr)
        return 1
    except (CLIError, TransactionRejected, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
