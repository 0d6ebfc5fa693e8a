# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from assetsync.app import (
    build_asset_image_service,
    build_stocktake_service,
    list_staging_batches,
    run_feed_import,
    serve_feed_import_schedule,
)
from assetsync.config import configure_logging
from assetsync.domain.errors import ValidationError
from assetsync.domain.ports import Upload
from assetsync.domain.stocktake import ScanRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

REPORT_KINDS = ("summary", "detail", "export")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Asset registry sync and stocktake")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("import-now", help="Run one feed import immediately")
    subparsers.add_parser("schedule", help="Run the cron-triggered feed import")
    batches = subparsers.add_parser("staging-batches", help="Show the latest import batches")
    batches.add_argument(
        "--limit", type=int, default=5, help="Batches to list (default: %(default)s)"
    )

    stocktake = subparsers.add_parser("stocktake", help="Stocktake lifecycle commands")
    stocktake_sub = stocktake.add_subparsers(dest="stocktake_command", required=True)

    open_cmd = stocktake_sub.add_parser("open", help="Open (or fetch) the stocktake of a year")
    _add_plant_year(open_cmd)
    open_cmd.add_argument("--user-id", required=True, help="User opening the stocktake")

    status_cmd = stocktake_sub.add_parser("status", help="Show the state of a stocktake year")
    _add_plant_year(status_cmd)

    close_cmd = stocktake_sub.add_parser("close", help="Close a stocktake year")
    _add_plant_year(close_cmd)
    close_cmd.add_argument("--user-id", required=True, help="User closing the year")

    carry = stocktake_sub.add_parser(
        "carry-forward", help="Copy pending items into the following year"
    )
    carry.add_argument("--plant-id", required=True)
    carry.add_argument("--from-year", required=True)
    carry.add_argument("--to-year", help="Target year (default: from-year + 1)")
    carry.add_argument("--user-id", required=True)

    import_cmd = stocktake_sub.add_parser("import", help="Import a count sheet (.xlsx or .csv)")
    import_cmd.add_argument("--stocktake-id", required=True)
    import_cmd.add_argument("--user-id", required=True, help="User importing the sheet")
    import_cmd.add_argument("file", type=Path)

    scan = stocktake_sub.add_parser("scan", help="Record one counted asset with its photo")
    scan.add_argument("--stocktake-id", required=True)
    scan.add_argument("--asset-id", required=True)
    scan.add_argument("--user-id", required=True, help="User who counted the asset")
    scan.add_argument("--status", help="Status code or alias (default: COUNTED)")
    scan.add_argument("--method", help="Count method or alias (default: MANUAL)")
    scan.add_argument("--note")
    scan.add_argument("--image", type=Path, required=True)

    report = stocktake_sub.add_parser("report", help="Summary, detail or export of a year")
    _add_plant_year(report)
    report.add_argument("--kind", choices=REPORT_KINDS, default="summary")
    report.add_argument("--status", help="Only rows with this status (detail)")
    report.add_argument("--search", help="Match asset number or description")

    asset = subparsers.add_parser("asset", help="Asset registry commands")
    asset_sub = asset.add_subparsers(dest="asset_command", required=True)
    attach = asset_sub.add_parser("attach-image", help="Upload a photo for an asset")
    attach.add_argument("--asset-id", required=True)
    attach.add_argument("--image", type=Path, required=True)
    attach.add_argument("--primary", action="store_true", help="Mark as the primary photo")

    return parser.parse_args(list(argv))


def _add_plant_year(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--plant-id", required=True)
    parser.add_argument("--year", help="Audit year (default: current year)")


def _read_upload(path: Path) -> Upload:
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    mime_type, _ = mimetypes.guess_type(path.name)
    return Upload(content=content, original_name=path.name, mime_type=mime_type)


def _emit(payload: object) -> None:
    if is_dataclass(payload) and not isinstance(payload, type):
        payload = asdict(payload)
    elif isinstance(payload, list):
        payload = [
            asdict(item) if is_dataclass(item) and not isinstance(item, type) else item
            for item in payload
        ]
    print(json.dumps(payload, default=str, indent=2))


def _run_stocktake(args: argparse.Namespace) -> int:
    service = build_stocktake_service()
    command = args.stocktake_command
    if command == "open":
        stocktake_id = service.open(plant_id=args.plant_id, year=args.year, user_id=args.user_id)
        _emit({"stocktake_id": stocktake_id})
    elif command == "status":
        config = service.year_config(plant_id=args.plant_id, year=args.year)
        _emit(
            {
                "state": service.state(plant_id=args.plant_id, year=args.year),
                "year_config": _entity_fields(config),
            }
        )
    elif command == "close":
        service.close_year(plant_id=args.plant_id, year=args.year, closer_id=args.user_id)
        _emit({"closed": True})
    elif command == "carry-forward":
        _emit(
            service.carry_forward(
                plant_id=args.plant_id,
                from_year=args.from_year,
                to_year=args.to_year,
                user_id=args.user_id,
            )
        )
    elif command == "import":
        _emit(
            service.import_counts(
                stocktake_id=args.stocktake_id,
                importer_id=args.user_id,
                upload=_read_upload(args.file),
            )
        )
    elif command == "scan":
        request = ScanRequest(
            stocktake_id=args.stocktake_id,
            asset_id=args.asset_id,
            counted_by_user_id=args.user_id,
            status_code=args.status,
            count_method=args.method,
            note_text=args.note,
        )
        _emit(service.scan(request, _read_upload(args.image)))
    elif command == "report":
        if args.kind == "summary":
            _emit(service.summary(plant_id=args.plant_id, year=args.year))
        elif args.kind == "detail":
            _emit(
                service.detail(
                    plant_id=args.plant_id,
                    year=args.year,
                    status_code=args.status,
                    search=args.search,
                )
            )
        else:
            _emit(service.export(plant_id=args.plant_id, year=args.year, search=args.search))
    else:
        raise ValueError(f"Unsupported stocktake command: {command}")
    return 0


def _entity_fields(entity: object) -> dict[str, object] | None:
    if entity is None:
        return None
    return {key: value for key, value in vars(entity).items() if not key.startswith("_")}


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "import-now":
        summary = run_feed_import()
        if summary is None:
            log.warning("Feed import already running")
            return 1
        _emit(summary)
        return 0 if summary.succeeded else 1
    if args.command == "schedule":
        serve_feed_import_schedule()
        return 0
    if args.command == "staging-batches":
        _emit([_entity_fields(batch) for batch in list_staging_batches(limit=args.limit)])
        return 0
    if args.command == "stocktake":
        return _run_stocktake(args)
    if args.command == "asset" and args.asset_command == "attach-image":
        service = build_asset_image_service()
        _emit(
            service.attach(
                asset_id=args.asset_id,
                image=_read_upload(args.image),
                is_primary=args.primary,
            )
        )
        return 0
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        exit_code = _dispatch(parsed_args)
    except ValidationError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Command %s failed", parsed_args.command)
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
