"""Command line tool for assembling and renaming android build artifacts."""

import argparse
import asyncio
import logging
import os
import sys
import traceback

from artifact_renamer.config import SigningConfig
from artifact_renamer.exceptions import RenamerException
from . import get, rename

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for renaming android build artifacts.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    rename.RenameAction.register(subparsers)
    get.GetAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Artifact-renamer command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    # Credentials only come from the environment here, everything below takes
    # them as explicit configuration.
    signing = SigningConfig.from_env(os.environ)

    action = args.cls()
    try:
        asyncio.run(action.run(signing=signing, **vars(args)))
    except RenamerException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("artifact-renamer error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
