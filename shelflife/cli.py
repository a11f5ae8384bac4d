"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from contextlib import closing

from .config import load_config
from .db import InventoryDB, ItemNotFoundError, ProfileDB
from .messages import MessageCatalog
from .models import Category, LeadTimeConfig, Status
from .notify import create_platform
from .reminders import ReminderScheduler
from .service import InventoryService
from .status import days_until_expiration

_STATUS_MARKS = {
    Status.FRESH: " ",
    Status.EXPIRING_SOON: "!",
    Status.EXPIRED: "x",
}


def main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="shelflife",
        description="Track household item expiration dates and get reminded before they expire",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the configuration file (TOML)",
    )

    sub = parser.add_subparsers(dest="command")
    categories = [c.value for c in Category]

    # add
    add_parser = sub.add_parser("add", help="Add an item")
    add_parser.add_argument("name")
    add_parser.add_argument("category", choices=categories)
    add_parser.add_argument("expiration_date", help="YYYY-MM-DD")
    add_parser.add_argument("--barcode", default=None)
    add_parser.add_argument("--image", dest="image_uri", default=None)

    # list
    list_parser = sub.add_parser("list", help="List items with their status")
    list_parser.add_argument("--json", action="store_true", help="Output JSON")
    list_parser.add_argument(
        "--expiring", action="store_true", help="Only items expiring soon or expired"
    )

    # edit
    edit_parser = sub.add_parser("edit", help="Edit an item")
    edit_parser.add_argument("item_id")
    edit_parser.add_argument("--name", default=None)
    edit_parser.add_argument("--category", choices=categories, default=None)
    edit_parser.add_argument("--expires", dest="expiration_date", default=None)
    edit_parser.add_argument("--barcode", default=None)
    edit_parser.add_argument("--image", dest="image_uri", default=None)

    # delete
    delete_parser = sub.add_parser("delete", help="Delete an item")
    delete_parser.add_argument("item_id")

    # lead-times
    lead_parser = sub.add_parser(
        "lead-times", help="Show or change reminder lead times (days)"
    )
    for c in Category:
        lead_parser.add_argument(f"--{c.name.lower()}", type=int, default=None)

    # run
    run_parser = sub.add_parser(
        "run", help="Run the reminder scheduler (other commands only update the store)"
    )
    run_parser.add_argument(
        "--sync-schedule",
        default="*/15 * * * *",
        help="Cron expression for picking up item and lead time changes",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        match args.command:
            case "add":
                asyncio.run(_cmd_add(config, args))
            case "list":
                _cmd_list(config, args)
            case "edit":
                asyncio.run(_cmd_edit(config, args))
            case "delete":
                asyncio.run(_cmd_delete(config, args))
            case "lead-times":
                asyncio.run(_cmd_lead_times(config, args))
            case "run":
                asyncio.run(_cmd_run(config, args))
    except ItemNotFoundError as e:
        print(f"Item not found: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


def _build_service(config, platform=None) -> InventoryService:
    """Service over the configured store, scheduling reminders only with a platform."""
    reminders = None
    if platform is not None:
        reminders = ReminderScheduler(
            platform=platform,
            messages=MessageCatalog(config.notifications.locale),
        )
    return InventoryService(
        inventory=InventoryDB(config.database.path),
        profiles=ProfileDB(config.database.path),
        reminders=reminders,
        default_lead_times=config.lead_times,
        concurrent_reschedule=config.notifications.concurrent_reschedule,
    )


def _print_item(item) -> None:
    days = days_until_expiration(item.expiration_date)
    mark = _STATUS_MARKS[item.status]
    print(
        f"{mark} {item.id[:8]}  {item.name:<20} {item.category.value:<10} "
        f"{item.expiration_date}  {days:>4}d  {item.status.value}"
    )


async def _cmd_add(config, args) -> None:
    with closing(_build_service(config)) as service:
        item = await service.add_item(
            args.name,
            args.category,
            args.expiration_date,
            barcode=args.barcode,
            image_uri=args.image_uri,
        )
    print(f"Added {item.name} ({item.id})")
    _print_item(item)


def _cmd_list(config, args) -> None:
    with closing(_build_service(config)) as service:
        items = service.expiring_items() if args.expiring else service.list_items()

    if args.json:
        data = [
            {
                "id": i.id,
                "name": i.name,
                "category": i.category.value,
                "expiration_date": i.expiration_date,
                "days_until_expiration": days_until_expiration(i.expiration_date),
                "status": i.status.value,
                "barcode": i.barcode,
                "image_uri": i.image_uri,
                "created_at": i.created_at,
            }
            for i in items
        ]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not items:
        print("No items.")
        return
    for item in items:
        _print_item(item)


async def _cmd_edit(config, args) -> None:
    changes = {
        key: getattr(args, key)
        for key in ("name", "category", "expiration_date", "barcode", "image_uri")
        if getattr(args, key) is not None
    }
    with closing(_build_service(config)) as service:
        item = await service.edit_item(_resolve_id(service, args.item_id), **changes)
    _print_item(item)


async def _cmd_delete(config, args) -> None:
    with closing(_build_service(config)) as service:
        item_id = _resolve_id(service, args.item_id)
        await service.delete_item(item_id)
    print(f"Deleted {item_id}")


async def _cmd_lead_times(config, args) -> None:
    with closing(_build_service(config)) as service:
        current = service.lead_times
        requested = {
            c: getattr(args, c.name.lower())
            for c in Category
            if getattr(args, c.name.lower()) is not None
        }
        if requested:
            values = {c: requested.get(c, current[c]) for c in Category}
            current = LeadTimeConfig.from_mapping(values)
            await service.update_lead_times(current)
            print("Lead times saved")

    for category, days in current.as_dict().items():
        print(f"  {category:<10} {days} days")


async def _cmd_run(config, args) -> None:
    platform = create_platform(config)
    await platform.initialize()
    service = _build_service(config, platform)
    try:
        await service.resync_reminders()
        if hasattr(platform, "add_cron_job"):
            platform.add_cron_job(
                service.sync_reminders,
                args.sync_schedule,
                job_id="sync_reminders",
                name="Reminder sync",
            )
        if hasattr(platform, "pending"):
            for r in platform.pending():
                print(f"  {r['run_date']}  {r['item_name']}")
        print("Reminder scheduler running. Press Ctrl+C to stop.")
        await asyncio.Event().wait()
    finally:
        await platform.shutdown()
        service.close()


def _resolve_id(service: InventoryService, prefix: str) -> str:
    """Expand a unique id prefix (as shown by ``list``) to a full item id."""
    matches = [i.id for i in service.list_items() if i.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValueError(f"Ambiguous item id prefix: {prefix!r}")
    raise ItemNotFoundError(prefix)
