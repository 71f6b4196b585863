"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m wormhole_cli new-secret [--difficulty D] [--json]
    python -m wormhole_cli create-input --secret HEX --rpc-url URL --nullifier-address ADDR
                                        --withdraw-amount N [--withdrawal-index I]
                                        [--cumulative-withdrawn-amount N] [--block B] [--out PATH]
    python -m wormhole_cli execute --input PATH [--backend sp1|risc0|pico] [--json]
    python -m wormhole_cli config --init|--show

Environment Variables:
    WORMHOLE_RPC_URL                JSON-RPC endpoint
    WORMHOLE_NULLIFIER_ADDRESS      Nullifier registry address
    WORMHOLE_POW_LOG_DIFFICULTY     Proof-of-work exponent (default: 24)
    WORMHOLE_DEBUG                  Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from wormhole import __version__
from wormhole.config import RuntimeConfig
from wormhole.program import BACKENDS
from wormhole.schemas.errors import WormholeException
from wormhole_cli.commands import create_input, execute, secret


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

DEFAULT_CONFIG_PATH = "wormhole.yaml"


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
        force=True,
    )


def load_config(path: Path | None) -> RuntimeConfig:
    """YAML file (explicit, or ./wormhole.yaml if present) overlaid with env vars."""
    if path is None and Path(DEFAULT_CONFIG_PATH).exists():
        path = Path(DEFAULT_CONFIG_PATH)
    if path is None:
        return RuntimeConfig.from_env()
    return RuntimeConfig.from_yaml(path).with_env_overrides()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="wormhole",
        description="Wormhole withdrawals - generate secrets, build witnesses and execute the program.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to YAML configuration file (default: ./{DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO, DEBUG when debug is configured)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- new-secret command ---
    secret_parser = subparsers.add_parser(
        "new-secret",
        help="Generate a secret satisfying the proof-of-work condition",
    )
    secret_parser.add_argument(
        "--difficulty",
        type=int,
        default=None,
        help="Proof-of-work exponent (default: from config, 24)",
    )
    secret_parser.add_argument(
        "--max-seconds",
        type=float,
        default=None,
        help="Give up after this many seconds",
    )
    secret_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    secret_parser.set_defaults(func=secret.new_secret_cmd)

    # --- create-input command ---
    input_parser = subparsers.add_parser(
        "create-input",
        help="Build a program witness from chain state",
    )
    input_parser.add_argument("--secret", type=str, required=True, help="Secret as 0x-prefixed hex")
    input_parser.add_argument("--rpc-url", type=str, default=None, help="JSON-RPC endpoint (default: from config)")
    input_parser.add_argument(
        "--nullifier-address",
        type=str,
        default=None,
        help="Nullifier registry address (default: from config)",
    )
    input_parser.add_argument("--withdraw-amount", type=str, required=True, help="Amount in wei (decimal or 0x hex)")
    input_parser.add_argument("--withdrawal-index", type=str, default=None, help="Explicit withdrawal index (default: probe the registry)")
    input_parser.add_argument(
        "--cumulative-withdrawn-amount",
        type=str,
        default="0",
        help="Total withdrawn by earlier withdrawals (default: 0)",
    )
    input_parser.add_argument("--block", type=str, default=None, help="Block number or tag (default: latest)")
    input_parser.add_argument("--out", "-o", type=str, default=None, help="Write the witness here instead of stdout")
    input_parser.add_argument("--receipts", type=str, default=None, help="Write RPC receipts to this JSON file")
    input_parser.add_argument("--no-preflight", action="store_true", default=False, help="Skip executing the program on the result")
    input_parser.set_defaults(func=create_input.create_input_cmd)

    # --- execute command ---
    execute_parser = subparsers.add_parser(
        "execute",
        help="Execute the program on a witness without proving",
    )
    execute_parser.add_argument("--input", "-i", type=str, required=True, help="Witness JSON file")
    execute_parser.add_argument(
        "--backend",
        type=str,
        choices=sorted(BACKENDS),
        default="sp1",
        help="Backend adapter to execute (default: sp1)",
    )
    execute_parser.add_argument(
        "--explain",
        action="store_true",
        default=False,
        help="On failure, re-run outside the program boundary and report the failed check",
    )
    execute_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    execute_parser.set_defaults(func=execute.execute_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument("--init", action="store_true", default=False, help="Create a template configuration file")
    config_parser.add_argument("--show", action="store_true", default=False, help="Show current configuration")
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path for config file (default: {DEFAULT_CONFIG_PATH})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(RuntimeConfig().to_yaml())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (WORMHOLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: wormhole config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or ("DEBUG" if config.debug else "INFO")
    setup_logging(level=log_level, log_file=args.log_file)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except WormholeException as e:
        if config.debug:
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        if e.details:
            print(json.dumps(e.details, indent=2, default=str), file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
