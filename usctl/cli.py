"""
usctl CLI - Userscripts control tool.

Usage:
    usctl -Q                     Resolve dependencies and list scripts
    usctl -E                     Enable scripts until interrupted
    usctl --init-config          Write a default configuration file
"""

import argparse
import logging
import sys
from pathlib import Path

from userscripts.config import ConfigError, load_settings, write_default_config


class CLIError(Exception):
    """Base exception for usctl errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with pacman-style flags."""
    parser = argparse.ArgumentParser(
        prog="usctl",
        description="Userscripts control tool",
        add_help=False,
    )

    # Operation flags (mutually exclusive)
    ops = parser.add_mutually_exclusive_group()
    ops.add_argument("-Q", "--query", action="store_true", help="List scripts")
    ops.add_argument("-E", "--enable", action="store_true", help="Run scripts")
    ops.add_argument(
        "--init-config", action="store_true", help="Write default configuration"
    )
    ops.add_argument("-h", "--help", action="store_true", help="Show help")

    # Common options
    parser.add_argument("-c", "--config", type=Path, help="Configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    return parser


def print_help():
    """Print help message."""
    help_text = """
usctl - Userscripts control tool

Usage:
    usctl -Q                     Resolve dependencies and list scripts
    usctl -E                     Enable scripts until interrupted
    usctl --init-config          Write a default configuration file

Options:
    -c, --config PATH            Configuration file
    -v, --verbose                Verbose output
    -h, --help                   Show this help
"""
    print(help_text.strip())


def main(argv: list[str] | None = None) -> int:
    """Main entry point for usctl CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.help or not (args.query or args.enable or args.init_config):
            print_help()
            return 0

        if args.init_config:
            path = write_default_config(args.config)
            print(f"Wrote {path}")
            return 0

        settings = load_settings(args.config)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if args.query:
            from usctl.commands.query import query_command

            return query_command(settings)

        if args.enable:
            from usctl.commands.enable import enable_command

            return enable_command(settings)

    except (CLIError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
