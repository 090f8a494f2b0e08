"""CLI entrypoint for tmplgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import load_config
from .errors import ConfigError, TmplgenError
from .logging import configure_logging, get_logger
from .models import PkgType
from .orchestrator import Orchestrator, RunOptions


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmplgen",
        description="Generate xbps-src templates for crates, gems and Perl distributions.",
    )
    parser.add_argument("pkg_name", metavar="PKGNAME", help="Name of the package to write a template for.")
    parser.add_argument(
        "-t",
        "--type",
        dest="tmpl_type",
        choices=[pkg_type.value for pkg_type in PkgType],
        help="Package type; queried from all registries when omitted.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite an existing template.",
    )
    parser.add_argument(
        "-u",
        "--update",
        action="store_true",
        help="Update version and checksum of an existing template.",
    )
    parser.add_argument(
        "-U",
        "--update-all",
        action="store_true",
        help="Like --update, but also refresh homepage, short_desc and distfiles.",
    )
    parser.add_argument(
        "-n",
        "--no-prefix",
        action="store_true",
        help="Don't prefix the package name with rust-, ruby- or perl-.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress messages.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show debug output, including registry traffic.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a tmplgen.yml (defaults to $XDG_CONFIG_HOME/tmplgen/tmplgen.yml).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for tmplgen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), debug=bool(args.debug), log_file=args.log_file)
    logger = get_logger()

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        parser.exit(1)

    options = RunOptions(
        pkg_name=args.pkg_name,
        pkg_type=PkgType.parse(args.tmpl_type) if args.tmpl_type else None,
        force=bool(args.force),
        update_version=bool(args.update),
        update_all=bool(args.update_all),
        prefix=not args.no_prefix,
    )

    try:
        outcome = Orchestrator(config).run(options)
    except TmplgenError as exc:
        logger.error("%s", exc)
        parser.exit(1)
    except OSError as exc:
        logger.error("tmplgen failed: %s", exc)
        parser.exit(1)

    action = "updated" if outcome.updated else "written"
    print(f"Template {action} at {outcome.path}")
    for name in outcome.dependencies:
        print(f"Dependency template written for {name}")


if __name__ == "__main__":
    main(sys.argv[1:])
