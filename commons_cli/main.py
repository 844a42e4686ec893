"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m commons_cli batch [--events-file PATH] [--epoch N] [--out PATH] [--json]
    python -m commons_cli verify <payload_path> [--address ADDR] [--json] [--debug]
    python -m commons_cli config --init

Environment Variables:
    COMMONS_REWARD_POOL             Default reward pool (default: 1000)
    COMMONS_DEFAULT_ADDRESS         Fallback claimant address
    COMMONS_DEFAULT_EVENT_AMOUNT    Score for events without an amount (default: 1)
    COMMONS_TOKENLOG_REPO           GitHub "owner/name" to fetch issues from
    COMMONS_LOG_LEVEL               Log level (default: INFO)
    COMMONS_LOG_FILE                Optional log file
    COMMONS_PIPELINE_SILENT         Set to 1 to silence pipeline logging
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from commons_cli import __version__
from commons_cli.commands import batch, verify
from commons_cli.config import ENV_PREFIX, get_default_config_template, load_config
from core.config.runtime import load_runtime_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="commons",
        description="Commons rewards CLI - Build reward batches and verify claim proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./commons.json or ~/.config/commons/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- batch command ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Generate a reward batch and its claim proofs",
        description="Collect praise events, build the Merkle tree and emit the epoch payload.",
    )
    batch_parser.add_argument(
        "--events-file",
        type=str,
        default=None,
        help="JSON file holding a list of praise events (labels or objects)",
    )
    batch_parser.add_argument(
        "--epoch",
        type=int,
        default=None,
        help="Epoch identifier recorded in the payload (default: from config or 1)",
    )
    batch_parser.add_argument(
        "--out", "--output", "-o",
        dest="out",
        type=str,
        default=None,
        help="Write the payload to this path",
    )
    batch_parser.add_argument(
        "--reward-pool",
        type=int,
        default=None,
        help="Tokens to distribute (default: from config)",
    )
    batch_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the full payload as JSON",
    )
    batch_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Raise errors with tracebacks",
    )
    batch_parser.set_defaults(func=batch.batch_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify claim proofs in a payload file offline",
        description="Recompute each claim leaf and fold its proof against the published root.",
    )
    verify_parser.add_argument(
        "payload_path",
        type=str,
        help="Path to a payload or epoch JSON file",
    )
    verify_parser.add_argument(
        "--address",
        type=str,
        default=None,
        help="Only verify the claim for this address",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the verification report as JSON",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Raise errors with tracebacks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Write or inspect commons.json",
        description="Write a config template or print the effective reward settings.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Write a commons.json template to --path",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Print the effective settings and where they came from",
    )
    config_parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite an existing file with --init",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="commons.json",
        help="Path for config file (default: commons.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def active_env_overrides() -> dict[str, str]:
    """COMMONS_* variables currently set, which win over any config file."""
    return {
        name: value
        for name, value in sorted(os.environ.items())
        if name.startswith(ENV_PREFIX) and value
    }


def config_cmd(args: argparse.Namespace) -> int:
    """Write a config template, or print the settings a batch run would use."""
    path = Path(args.path)

    if args.init:
        if path.exists() and not args.force:
            print(f"Error: {path} already exists (use --force to overwrite)", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        path.write_text(get_default_config_template())
        print(f"Wrote {path}")
        print(f"Reward pool, default claimant and tokenlog repo can also come from {ENV_PREFIX}* variables.")
        return EXIT_SUCCESS

    if not args.show:
        print("Nothing to do: pass --init to write a template or --show to print settings.")
        return EXIT_SUCCESS

    source = path if path.exists() else None
    cli_config = load_config(source)
    runtime_config = load_runtime_config(source)
    effective = {
        **asdict(cli_config),
        **runtime_config.to_dict(),
        "source": str(source) if source else "defaults",
        "env_overrides": active_env_overrides(),
    }
    print(json.dumps(effective, indent=2, default=str))
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
