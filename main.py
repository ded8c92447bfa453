"""CLI entrypoint for iContribute.

Usage:
    python main.py [--output-dir DIR] [--verbose] <command>

Commands:
    collect      Aggregate git history into contributor records on disk
    list         Print the persisted contributors
    show HANDLE  Print the contributor with this code-hosting handle
    serve        Run the read-only HTTP API

Options:
    --output-dir DIR         Directory holding contributors.json (default: $ICONTRIBUTE_DATA_DIR or ./contributors)
    --verbose                Log at DEBUG level
    --repo PATH              (collect) Path inside the git repository (default: $ICONTRIBUTE_REPO or .)
    --threshold N            (collect) Commits needed for the Maintainer role (default: 5)
    --offline                (collect) Skip avatar probes; every author gets a Gravatar
    --json                   (list) Print JSON instead of a table
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from icontribute.collector import collect_contributors, resolver_from_settings
from icontribute.config import Settings
from icontribute.models import MAINTAINER, to_json
from icontribute.store import find_by_username, load_contributors

logger = logging.getLogger("icontribute")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def cmd_collect(args: argparse.Namespace, settings: Settings) -> int:
    threshold = args.threshold if args.threshold is not None else settings.maintainer_threshold
    try:
        with resolver_from_settings(settings, offline=args.offline) as resolver:
            records = collect_contributors(
                args.repo or settings.repo_path,
                settings.data_dir,
                threshold=threshold,
                resolver=resolver,
            )
    except Exception:
        logger.exception("Error collecting contributors")
        return 1

    maintainers = sum(1 for r in records if r.role == MAINTAINER)
    print(f"Wrote {len(records)} contributors to {settings.data_dir} ({maintainers} maintainer(s), threshold={threshold})")
    return 0


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    contributors = load_contributors(settings.data_dir)
    if args.json:
        print(json.dumps(contributors, indent=2, ensure_ascii=False))
        return 0
    print(f"Contributors in '{settings.data_dir}': {len(contributors)}\n")
    for c in contributors:
        username = c.get("username") or "-"
        print(f"  {c.get('name', ''):<25}  {c.get('role', ''):<11}  commits={c.get('commits', 0):<5}  @{username}")
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    print(to_json(find_by_username(args.handle, settings.data_dir)))
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from icontribute.api import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port if args.port is not None else settings.port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    # Shared flags available on every subcommand (and the top-level parser)
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--output-dir", default=argparse.SUPPRESS, metavar="DIR", help="Directory holding contributors.json")
    common.add_argument("--verbose", action="store_true", default=argparse.SUPPRESS, help="Log at DEBUG level")

    parser = argparse.ArgumentParser(
        prog="icontribute",
        description="Build contributor records from a git repository and serve them.",
        parents=[common],
    )

    sub = parser.add_subparsers(dest="command", required=True)

    collect = sub.add_parser("collect", parents=[common], help="Aggregate git history into contributor records")
    collect.add_argument("--repo", default=None, metavar="PATH", help="Path inside the git repository")
    collect.add_argument("--threshold", type=int, default=None, metavar="N", help="Commits needed for the Maintainer role")
    collect.add_argument("--offline", action="store_true", help="Skip avatar probes")

    list_cmd = sub.add_parser("list", parents=[common], help="Print the persisted contributors")
    list_cmd.add_argument("--json", action="store_true", help="Print JSON")

    show = sub.add_parser("show", parents=[common], help="Print one contributor by handle")
    show.add_argument("handle", metavar="HANDLE")

    serve = sub.add_parser("serve", parents=[common], help="Run the read-only HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


_COMMANDS = {
    "collect": cmd_collect,
    "list": cmd_list,
    "show": cmd_show,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(getattr(args, "verbose", False))

    settings = Settings.from_env()
    output_dir = getattr(args, "output_dir", None)
    if output_dir:
        settings.data_dir = Path(output_dir)
    return _COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
