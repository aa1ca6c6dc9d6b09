"""sigverdict CLI: derive keys, inspect and feed a persisted result store."""

import argparse
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path

from pydantic import ValidationError


def _add_request_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--message", required=True, help="Message bytes, hex encoded")
    parser.add_argument("--signature", required=True, help="Aggregate signature bytes, hex encoded")


def _load_request(args):
    from .contracts import VerificationRequest
    return VerificationRequest.from_hex(args.message, args.signature)


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _cmd_key(args) -> None:
    from .kernel.key_deriver import derive_key
    print(derive_key(_load_request(args)))


def _cmd_query(args) -> None:
    from ._internal.io.snapshot import load_snapshot
    from .kernel.query import QueryService

    store = load_snapshot(args.store.resolve(), missing_ok=True)
    status = QueryService(store).status(_load_request(args))
    if args.json:
        print(json.dumps(status.model_dump(), indent=2))
    elif status.available:
        print("true" if status.result else "false")
    else:
        print("Status: NOT_AVAILABLE")
    if not status.available:
        sys.exit(1)


def _cmd_dispatch(args) -> None:
    from .config import load_config_from_path
    from .kernel.dispatcher import RequestDispatcher

    config = load_config_from_path(args.config.resolve())

    class _PrintRelay:
        def dispatch(self, request):
            print(json.dumps(request.to_dict(), indent=2, sort_keys=True))

    RequestDispatcher(config, _PrintRelay()).request_verification(_load_request(args))


def _cmd_ingest(args) -> None:
    from ._internal.io.snapshot import locked_snapshot
    from .api import VerificationCache
    from .config import load_config_from_path
    from .contracts import CallContext
    from .kernel.guard import AuthError
    from .kernel.ingestor import StoreConflict
    from .kernel.notifications import NotificationLog

    config = load_config_from_path(args.config.resolve())
    store_path = args.store.resolve()
    notifications = NotificationLog(args.log.resolve() if args.log else None)

    class _NoRelay:
        def dispatch(self, request):
            raise RuntimeError("ingest command does not dispatch")

    context = CallContext(caller=args.caller, program_id=args.program_id)
    request = _load_request(args)
    with locked_snapshot(store_path) as store:
        cache = VerificationCache(config, _NoRelay(), store=store, notifications=notifications)
        try:
            outcome = cache.ingest(context, request, args.result == "true")
        except AuthError as e:
            _fail(f"{e.code.value}: {e}")
        except StoreConflict as e:
            _fail(f"STORE_CONFLICT: {e}")
    if not args.quiet:
        print(f"[OK] {outcome.value}")
        print(f"  Store: {store_path}")


def main():
    """Main CLI entry point for sigverdict commands."""
    try:
        sigverdict_version = get_version("sigverdict")
    except PackageNotFoundError:
        sigverdict_version = "dev"

    parser = argparse.ArgumentParser(
        prog="sigverdict",
        description="sigverdict: content-addressed cache of relay-computed signature verdicts"
    )
    parser.add_argument("--version", action="version", version=f"sigverdict {sigverdict_version}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr.")
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    key_parser = subparsers.add_parser(
        "key", help="Print the cache key of a request"
    )
    _add_request_args(key_parser)

    query_parser = subparsers.add_parser(
        "query", help="Look up a verdict in a snapshot file"
    )
    query_parser.add_argument("--store", type=Path, required=True, help="Path to result snapshot")
    query_parser.add_argument("--json", action="store_true", help="Print the full lookup status as JSON")
    _add_request_args(query_parser)

    dispatch_parser = subparsers.add_parser(
        "dispatch", help="Print the relay request for a verification"
    )
    dispatch_parser.add_argument("--config", type=Path, required=True, help="Path to verifier config")
    _add_request_args(dispatch_parser)

    ingest_parser = subparsers.add_parser(
        "ingest", help="Record an authorized callback into a snapshot file", parents=[parent_parser]
    )
    ingest_parser.add_argument("--config", type=Path, required=True, help="Path to verifier config")
    ingest_parser.add_argument("--store", type=Path, required=True, help="Path to result snapshot")
    ingest_parser.add_argument("--log", type=Path, default=None, help="Append notices to this JSONL file")
    ingest_parser.add_argument("--caller", required=True, help="Caller address reported by the transport")
    ingest_parser.add_argument("--program-id", dest="program_id", required=True, help="Program id reported by the transport")
    ingest_parser.add_argument("--result", choices=["true", "false"], required=True, help="Verdict delivered")
    _add_request_args(ingest_parser)

    args = parser.parse_args()

    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "key": _cmd_key,
        "query": _cmd_query,
        "dispatch": _cmd_dispatch,
        "ingest": _cmd_ingest,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        handler(args)
    except FileNotFoundError as e:
        _fail(str(e))
    except (ValidationError, ValueError) as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
