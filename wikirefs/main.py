"""Command line entry point.

    wikirefs rename OldPage NewPage
    wikirefs referrers SomePage
    wikirefs uncreated
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from wikirefs.errors import WikiError
from wikirefs.logging_setup import install_global_exception_hooks, setup_logging
from wikirefs.session import WikiSession
from wikirefs.settings import load_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="wikirefs", description="Wiki page references and safe renames")
    p.add_argument("--config", type=Path, default=None, help="Path to INI config file")
    p.add_argument("--vault", type=Path, default=None, help="Page directory (overrides config)")
    p.add_argument("--log-file", type=Path, default=None, help="Log file path")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")

    sub = p.add_subparsers(dest="command", required=True)

    rn = sub.add_parser("rename", help="Rename a page and fix links to it")
    rn.add_argument("old_name")
    rn.add_argument("new_name")
    rn.add_argument("--keep-referrers", action="store_true", help="Do not rewrite referring pages")
    rn.add_argument("--author", default=None)

    ref = sub.add_parser("referrers", help="Pages linking to PAGE")
    ref.add_argument("page")

    out = sub.add_parser("refers-to", help="Pages PAGE links to")
    out.add_argument("page")

    sub.add_parser("uncreated", help="Linked pages that do not exist")
    sub.add_parser("unreferenced", help="Pages nobody links to")

    return p.parse_args(argv)


def _print_names(names) -> None:
    for name in sorted(names or (), key=str.lower):
        print(name)


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    if args.vault is not None:
        config = dataclasses.replace(config, vault_dir=args.vault)

    session = WikiSession.from_config(config)

    if args.command == "rename":
        report = session.rename_page_with_report(
            args.old_name,
            args.new_name,
            not args.keep_referrers,
            author=args.author,
        )
        print(report.new_name)
        for page in report.failed:
            print(f"warning: links in {page} were not updated", file=sys.stderr)
    elif args.command == "referrers":
        _print_names(session.find_referrers(args.page))
    elif args.command == "refers-to":
        _print_names(session.find_referenced_by(args.page))
    elif args.command == "uncreated":
        _print_names(session.find_uncreated())
    elif args.command == "unreferenced":
        _print_names(session.find_unreferenced())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    log = setup_logging(args.log_file, verbose=args.verbose)
    install_global_exception_hooks(log)

    try:
        return run(args)
    except WikiError as exc:
        log.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
