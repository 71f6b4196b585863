"""
CLI Execute Command

Runs a backend adapter on a witness in-process, without proving.

Usage:
    wormhole execute --input witness.json [--backend sp1|risc0|pico] [--explain] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from wormhole.program import LocalExecutor, create_backend, execute_wormhole_program
from wormhole.schemas.errors import ProgramAbortedException, WormholeException
from wormhole.schemas.program import WormholeProgramInput


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def explain_failure(stdin: bytes, difficulty: int) -> WormholeException | None:
    """Re-run outside the program boundary to find the failed check."""
    try:
        execute_wormhole_program(
            WormholeProgramInput.from_json(stdin),
            pow_log_difficulty=difficulty,
        )
    except WormholeException as e:
        return e
    return None


def execute_cmd(args: Namespace) -> int:
    """Handle execute command."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    stdin = input_path.read_bytes()
    difficulty = args.runtime_config.protocol.pow_log_difficulty
    adapter = create_backend(args.backend, pow_log_difficulty=difficulty)

    try:
        report = LocalExecutor().execute(adapter, stdin)
    except ProgramAbortedException:
        cause = explain_failure(stdin, difficulty) if args.explain else None
        if args.json:
            summary = {"ok": False, "backend": adapter.name}
            if cause is not None:
                summary["error"] = cause.to_error_model().model_dump()
            print(json.dumps(summary, indent=2, default=str))
        else:
            print(f"Program aborted ({adapter.name})")
            if cause is not None:
                print(f"Failed check [{cause.code}]: {cause.message}")
        return EXIT_VERIFICATION_FAILED

    if args.json:
        print(json.dumps({"ok": True, **report.to_dict()}, indent=2))
    else:
        output = report.output
        print(f"Backend: {report.backend}")
        print(f"Nullifier: 0x{output.nullifier.hex()}")
        print(f"Withdraw amount: {output.withdraw_amount}")
        print(f"State root: 0x{output.state_root.hex()}")
        print(f"Public values: 0x{report.public_values.hex()}")
    return EXIT_SUCCESS
