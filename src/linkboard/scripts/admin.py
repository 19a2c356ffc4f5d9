"""Operator CLI: create tables, moderate submitted links and purge stale sessions."""
from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence

from linkboard.db.session import SessionLocal, create_tables
from linkboard.services.links import approve_link, list_pending
from linkboard.services.session_store import SqlCaptchaSessionStore


def _cmd_init_db(args: argparse.Namespace) -> int:
    create_tables()
    print("[linkboard-admin] tables created")
    return 0


def _cmd_list_pending(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        links = list_pending(db)
        if not links:
            print("[linkboard-admin] no pending links")
            return 0
        for link in links:
            print(f"{link.id}\t{link.created_at.isoformat()}\t{link.title}\t{link.url}")
    return 0


def _cmd_approve(args: argparse.Namespace) -> int:
    failed = False
    with SessionLocal() as db:
        for link_id in args.link_ids:
            if approve_link(db, link_id) is None:
                print(f"[linkboard-admin] link {link_id} not found", file=sys.stderr)
                failed = True
            else:
                print(f"[linkboard-admin] approved link {link_id}")
    return 1 if failed else 0


def _cmd_purge_expired(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        removed = SqlCaptchaSessionStore(db).purge_expired(int(time.time()))
    print(f"[linkboard-admin] purged {removed} expired session(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkboard-admin",
        description="Manage the Linkboard database and moderation queue",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init_db = sub.add_parser("init-db", help="Create all tables if they are missing.")
    init_db.set_defaults(func=_cmd_init_db)

    pending = sub.add_parser("list-pending", help="List links awaiting approval.")
    pending.set_defaults(func=_cmd_list_pending)

    approve = sub.add_parser("approve", help="Approve one or more links by id.")
    approve.add_argument("link_ids", nargs="+", type=int, metavar="LINK_ID")
    approve.set_defaults(func=_cmd_approve)

    purge = sub.add_parser(
        "purge-expired",
        help="Delete expired CAPTCHA sessions and the vote records they hold.",
    )
    purge.set_defaults(func=_cmd_purge_expired)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
