"""CLI for assetledger - dealer asset records on a versioned ledger."""

import argparse
import json
import logging
import platform
import sqlite3
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.errors import AssetLedgerError
from .core.model import Asset, AssetFields
from .runtime import Runtime, build_runtime

log = logging.getLogger(__name__)


def _dump(rt: Runtime, assets: list[Asset]) -> str:
    return json.dumps(
        [json.loads(rt.store.codec.encode(a)) for a in assets],
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _fields(args: argparse.Namespace) -> AssetFields:
    return AssetFields(
        msisdn=args.msisdn,
        pin=args.pin,
        balance=args.balance,
        status=args.status,
        trans_amount=args.trans_amount,
        trans_type=args.trans_type,
        remarks=args.remarks,
    )


def cmd_init(args: argparse.Namespace, rt: Runtime) -> int:
    """Write the genesis records."""
    records = rt.genesis_records()
    with rt.ledger.transaction() as ctx:
        count = rt.store.seed(ctx, records)
    if not args.quiet:
        print(f"Seeded {count} asset(s) in tx {ctx.tx_id}")
    return 0


def cmd_create(args: argparse.Namespace, rt: Runtime) -> int:
    """Create (or overwrite) an asset."""
    asset = Asset.from_fields(args.dealer_id, _fields(args))
    with rt.ledger.transaction() as ctx:
        rt.store.create(ctx, asset)
    if not args.quiet:
        print(rt.store.codec.encode(asset).decode("utf-8"))
    return 0


def cmd_read(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the stored payload of one asset."""
    with rt.ledger.transaction() as ctx:
        asset = rt.store.read(ctx, args.dealer_id)
    print(rt.store.codec.encode(asset).decode("utf-8"))
    return 0


def cmd_update(args: argparse.Namespace, rt: Runtime) -> int:
    """Replace all mutable fields of an asset."""
    with rt.ledger.transaction() as ctx:
        asset = rt.store.update(ctx, args.dealer_id, _fields(args))
    if not args.quiet:
        print(rt.store.codec.encode(asset).decode("utf-8"))
    return 0


def cmd_list(args: argparse.Namespace, rt: Runtime) -> int:
    """Print every asset as a JSON array, in ledger key order."""
    with rt.ledger.transaction() as ctx:
        assets = rt.store.list_all(ctx)
    print(_dump(rt, assets))
    return 0


def cmd_history(args: argparse.Namespace, rt: Runtime) -> int:
    """Print past versions of an asset, newest first."""
    with rt.ledger.transaction() as ctx:
        assets = rt.store.history(ctx, args.dealer_id)
    print(_dump(rt, assets))
    return 0


def cmd_exists(args: argparse.Namespace, rt: Runtime) -> int:
    with rt.ledger.transaction() as ctx:
        found = rt.store.exists(ctx, args.dealer_id)
    print("true" if found else "false")
    return 0


def _add_field_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("dealer_id", type=int, help="Dealer ID")
    parser.add_argument("--msisdn", required=True, help="Phone identifier")
    parser.add_argument("--pin", required=True, help="Dealer PIN")
    parser.add_argument("--balance", type=int, required=True)
    parser.add_argument("--status", required=True, help="e.g. SUCCESS or FAILURE")
    parser.add_argument("--trans-amount", dest="trans_amount", type=int, required=True)
    parser.add_argument(
        "--trans-type", dest="trans_type", required=True, help="e.g. ONLINE or OFFLINE"
    )
    parser.add_argument("--remarks", required=True, help="e.g. YES or NO")


def _version_string() -> str:
    return (
        f"assetledger {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.system().lower()}-{platform.machine()}"
    )


def _setup_logging(verbose: int, configured: str) -> None:
    if verbose >= 2:
        level: Any = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(configured)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="assetledger", description="Dealer asset ledger CLI"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/assetledger.toml)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to SQLite ledger DB (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    subparsers.add_parser("init", help="Write the genesis records")

    parser_create = subparsers.add_parser("create", help="Create an asset")
    _add_field_args(parser_create)

    parser_read = subparsers.add_parser("read", help="Read an asset")
    parser_read.add_argument("dealer_id", type=int, help="Dealer ID")

    parser_update = subparsers.add_parser("update", help="Replace an asset's fields")
    _add_field_args(parser_update)

    subparsers.add_parser("list", help="List all assets")

    parser_history = subparsers.add_parser("history", help="Show an asset's history")
    parser_history.add_argument("dealer_id", type=int, help="Dealer ID")

    parser_exists = subparsers.add_parser("exists", help="Check whether an asset exists")
    parser_exists.add_argument("dealer_id", type=int, help="Dealer ID")

    args = parser.parse_args(argv)

    rt = build_runtime(db_path=args.db, config_path=args.config)
    _setup_logging(args.verbose, rt.config.log.level)

    handlers = {
        "init": cmd_init,
        "create": cmd_create,
        "read": cmd_read,
        "update": cmd_update,
        "list": cmd_list,
        "history": cmd_history,
        "exists": cmd_exists,
    }
    handler = handlers[args.cmd]

    try:
        exit_code = handler(args, rt)
    except (AssetLedgerError, ValueError, OSError, sqlite3.Error) as e:
        log.debug("command %s failed", args.cmd, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
