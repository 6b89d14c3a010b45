"""Command-line entry point for the arch-sense daemon."""

import argparse
import logging
import logging.handlers
import signal
import sys
from pathlib import Path

from pydantic import ValidationError

from archsense.daemon.service import ArchSenseDaemon
from archsense.daemon.settings import DaemonSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("archsense")


def configure_logging(level: str, log_file: Path | None = None) -> None:
    """Send daemon logs to stderr and, optionally, a rotating file."""
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger("archsense")
    root.setLevel(level.upper())
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=5 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arch-sense-daemon",
        description="Fan, lighting and platform control daemon for Acer Predator laptops",
    )
    parser.add_argument("--socket", type=Path, help="Unix socket to listen on")
    parser.add_argument("--config", type=Path, help="Configuration file")
    parser.add_argument(
        "--interval", type=float, help="Fan curve period in seconds"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument("--log-file", type=Path, help="Also log to this file")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply the saved configuration to the hardware and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = DaemonSettings.from_env(
            socket_path=args.socket,
            config_path=args.config,
            control_interval=args.interval,
            log_level=args.log_level,
            log_file=args.log_file,
        )
    except ValidationError as e:
        print(f"arch-sense-daemon: invalid settings:\n{e}", file=sys.stderr)
        return 2
    configure_logging(settings.log_level, settings.log_file)

    daemon = ArchSenseDaemon(settings)
    failed = daemon.restore()
    if args.apply:
        if failed:
            logger.error("Failed to apply: %s", ", ".join(failed))
            return 1
        logger.info("Saved configuration applied")
        return 0

    try:
        daemon.start()
    except OSError as e:
        logger.critical("Cannot listen on %s: %s", settings.socket_path, e)
        return 1

    def _on_signal(signum: int, frame: object) -> None:
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        daemon.request_stop()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    logger.info("arch-sense daemon running")
    try:
        daemon.wait()
    finally:
        daemon.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
