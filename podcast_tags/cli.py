from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from .commands import retag as cmd_retag
from .commands import show as cmd_show
from .config import load_settings
from .episode import EpisodeMetadata
from .models import TagError

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Podcast episode ID3v2 tagging")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    show_parser = subparsers.add_parser("show", help="Print the ID3v2 frames of an audio file")
    show_parser.add_argument("path", type=Path)
    show_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )

    retag_parser = subparsers.add_parser(
        "retag", help="Copy an audio file with episode fields written into its tag"
    )
    retag_parser.add_argument("src", type=Path)
    retag_parser.add_argument("dst", type=Path)
    retag_parser.add_argument("--title", help="Episode title (TIT2)")
    retag_parser.add_argument("--show", dest="show_title", help="Show title, stored as album")
    retag_parser.add_argument("--artist", help="Show artist")
    retag_parser.add_argument("--number", type=int, help="Episode number, stored as track")
    retag_parser.add_argument(
        "--date", dest="air_date", type=date.fromisoformat, help="Air date (YYYY-MM-DD)"
    )
    retag_parser.add_argument("--description", help="Episode description, stored as comment")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    settings = load_settings(args.config)

    try:
        match args.command:
            case "show":
                if not cmd_show.run(args.path, settings, json_output=args.json):
                    raise SystemExit(1)
            case "retag":
                episode = EpisodeMetadata(
                    title=args.title,
                    show_title=args.show_title,
                    artist=args.artist,
                    number=args.number,
                    description=args.description,
                    air_date=args.air_date,
                )
                cmd_retag.run(args.src, args.dst, episode, settings)
            case _:
                parser.error("Unknown command")
    except (TagError, OSError) as exc:
        logging.getLogger(__name__).error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
