"""
Order Timeline CLI Utility

Command-line interface for inspecting and advancing order timelines.

Usage Examples:
    # Create the database tables
    python -m src.utils.order_timeline_cli init-db

    # Create an order
    python -m src.utils.order_timeline_cli create ZAM-2026-001 --customer "Jan Kowalski"

    # Show an order's timeline
    python -m src.utils.order_timeline_cli show 1
    python -m src.utils.order_timeline_cli show 1 --json

    # Move an order forward with a note
    python -m src.utils.order_timeline_cli status 1 "Kompletacja zamówienia" \
        --note "Klient zadzwonił" --actor "Jan"

    # Mark a checklist item manually / return it to automatic tracking
    python -m src.utils.order_timeline_cli override 1 kompletacja-zamowienia-wyslane-zamowienie done
    python -m src.utils.order_timeline_cli override 1 kompletacja-zamowienia-wyslane-zamowienie auto
"""

import argparse
import json
import logging
import sys

from src.models.enums import OrderType, TimelineState
from src.services import order_timeline_service
from src.services.database import initialize_app_database
from src.services.exceptions import ServiceError
from src.services.timeline import Actor, OrderTimeline

STATE_MARKERS = {
    TimelineState.COMPLETED: "[x]",
    TimelineState.CURRENT: "[>]",
    TimelineState.PENDING: "[ ]",
}

OVERRIDE_VALUES = {"done": True, "undone": False, "auto": None}


def format_timeline(timeline: OrderTimeline) -> str:
    """Render a timeline as plain text, one entry per line, tasks indented."""
    lines = [f"Status: {timeline.current_status}"]
    for entry in timeline.entries:
        stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M") if entry.timestamp else "-"
        prefix = "  note" if entry.is_note else STATE_MARKERS[entry.state]
        lines.append(f"{prefix} {entry.title} ({stamp})")
        if entry.is_note and entry.description:
            lines.append(f"        {entry.description}")
        for task in entry.tasks:
            mark = "x" if task.completed else " "
            source = "manual" if task.manual_override is not None else "auto"
            lines.append(f"      [{mark}] {task.label} <{task.id}> ({source})")
    return "\n".join(lines)


def show_cmd(order_id: int, as_json: bool) -> int:
    timeline = order_timeline_service.get_order_timeline(order_id)
    if as_json:
        print(json.dumps(timeline.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_timeline(timeline))
    return 0


def create_cmd(reference: str, customer: str, channel: str, order_type: str, review: bool) -> int:
    order = order_timeline_service.create_order(
        reference,
        customer_name=customer,
        channel=channel,
        order_type=OrderType(order_type),
        requires_review=review,
    )
    print(f"Created order {order.reference} (id={order.id}, status={order.status})")
    return 0


def status_cmd(order_id: int, target: str, note: str, actor: Actor) -> int:
    order = order_timeline_service.update_order_status(order_id, target, actor, note=note)
    print(f"Order {order_id} status: {order.status}")
    return 0


def override_cmd(order_id: int, task_id: str, value: str) -> int:
    overrides = order_timeline_service.set_task_override(
        order_id, task_id, OVERRIDE_VALUES[value]
    )
    print(f"Overrides for order {order_id}: {json.dumps(overrides, ensure_ascii=False)}")
    return 0


def confirm_cmd(order_id: int, order_type: str, actor: Actor) -> int:
    order = order_timeline_service.confirm_order(order_id, actor, OrderType(order_type))
    print(f"Order {order_id} confirmed as {order.order_type.value}, status: {order.status}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Order lifecycle timeline utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create database tables")

    create_parser = subparsers.add_parser("create", help="Create an order")
    create_parser.add_argument("reference", help="Unique order number")
    create_parser.add_argument("--customer", help="Customer name")
    create_parser.add_argument("--channel", help="Sales channel")
    create_parser.add_argument(
        "--type", dest="order_type", choices=[t.value for t in OrderType], default="production"
    )
    create_parser.add_argument(
        "--review", action="store_true", help="Mark the order as requiring review"
    )

    show_parser = subparsers.add_parser("show", help="Show an order's timeline")
    show_parser.add_argument("order_id", type=int)
    show_parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON")

    status_parser = subparsers.add_parser("status", help="Change an order's status")
    status_parser.add_argument("order_id", type=int)
    status_parser.add_argument("target", help="Target status")
    status_parser.add_argument("--note", help="Note recorded with the change")
    status_parser.add_argument("--actor", required=True, help="Display name of the actor")
    status_parser.add_argument("--email", help="Actor e-mail, used when the name is blank")

    override_parser = subparsers.add_parser("override", help="Set a manual task value")
    override_parser.add_argument("order_id", type=int)
    override_parser.add_argument("task_id")
    override_parser.add_argument("value", choices=sorted(OVERRIDE_VALUES))

    confirm_parser = subparsers.add_parser("confirm", help="Acknowledge an order under review")
    confirm_parser.add_argument("order_id", type=int)
    confirm_parser.add_argument(
        "--type", dest="order_type", choices=[t.value for t in OrderType], default="production"
    )
    confirm_parser.add_argument("--actor", required=True)
    confirm_parser.add_argument("--email")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_app_database()

    try:
        if args.command == "init-db":
            print("Database initialized")
            return 0
        elif args.command == "create":
            return create_cmd(
                args.reference, args.customer, args.channel, args.order_type, args.review
            )
        elif args.command == "show":
            return show_cmd(args.order_id, args.as_json)
        elif args.command == "status":
            return status_cmd(
                args.order_id, args.target, args.note, Actor(args.actor, args.email)
            )
        elif args.command == "override":
            return override_cmd(args.order_id, args.task_id, args.value)
        elif args.command == "confirm":
            return confirm_cmd(args.order_id, args.order_type, Actor(args.actor, args.email))
    except ServiceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
