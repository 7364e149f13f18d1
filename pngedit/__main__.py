"""Launch the PNGEditor desktop application.

Usage:
    python -m pngedit [PATH] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import logging

from pngedit import defaults


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pngedit", description=defaults.WINDOW_TITLE)
    parser.add_argument("path", nargs="?", help="PNG file to open at startup")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from pngedit.ui.dpg.app import PNGEditorApp

    app = PNGEditorApp()
    app.build()
    if args.path:
        app.file_io.open_path(args.path)
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
