"""
Command line entry point.

  python -m repocard render OWNER/REPO [-o FILE] [--option key=value ...]
  python -m repocard serve [--host HOST] [--port PORT]
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from repocard import config
from repocard.exceptions import RepoCardError
from repocard.fetcher import fetch_repo
from repocard.repo_card import render_repo_card
from repocard.server import build_options, serve

logger = logging.getLogger("repocard")


def parse_option_pairs(pairs: List[str]) -> Dict[str, str]:
    options = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        options[key.strip()] = value.strip()
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repocard",
        description="Render GitHub repository cards as SVG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s render octocat/Hello-World -o card.svg
  %(prog)s render octocat/Hello-World --option theme=dark --option show_age=true
  %(prog)s serve --port 8080
""",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Fetch a repository and write its card")
    render.add_argument("repo", metavar="OWNER/REPO", help="Repository to render")
    render.add_argument("-o", "--output", type=Path, metavar="FILE", help="Output file path (default: stdout)")
    render.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Card option, same names as the /api/pin query string (repeatable)",
    )
    render.add_argument("--token", help="GitHub token (default: ACCESS_TOKEN / GITHUB_TOKEN / PAT_1)")

    server = commands.add_parser("serve", help="Serve /api/pin over HTTP")
    server.add_argument("--host", default="127.0.0.1")
    server.add_argument("--port", type=int, default=8000)
    return parser


def run_render(args: argparse.Namespace) -> int:
    owner, sep, name = args.repo.partition("/")
    if not sep:
        logger.error(f"Expected OWNER/REPO, got {args.repo!r}")
        return 2
    try:
        options = build_options(parse_option_pairs(args.option))
    except argparse.ArgumentTypeError as e:
        logger.error(str(e))
        return 2

    try:
        repo = fetch_repo(owner, name, token=args.token)
    except RepoCardError as e:
        logger.error(f"{e.message} {e.secondary_message}".strip())
        return 1

    svg = render_repo_card(repo, options)
    if args.output:
        args.output.write_text(svg, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(svg + "\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        serve(args.host, args.port)
        return 0
    return run_render(args)


if __name__ == "__main__":
    sys.exit(main())
