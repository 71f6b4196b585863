"""
CLI New-Secret Command

Usage:
    wormhole new-secret [--difficulty D] [--max-seconds S] [--json]
"""

from __future__ import annotations

import json
import logging
import time
from argparse import Namespace

from web3 import Web3

from wormhole.crypto.hashing import to_hex
from wormhole.crypto.secret import generate_secret


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0


def new_secret_cmd(args: Namespace) -> int:
    """Handle new-secret command."""
    difficulty = args.difficulty
    if difficulty is None:
        difficulty = args.runtime_config.protocol.pow_log_difficulty

    logger.info(f"Searching for a secret at difficulty {difficulty}")
    started_at = time.monotonic()
    secret = generate_secret(difficulty, max_seconds=args.max_seconds)
    elapsed = time.monotonic() - started_at

    summary = {
        "secret": secret.to_hex(),
        "deposit_address": Web3.to_checksum_address(secret.deposit_address()),
        "nullifier_0": to_hex(secret.nullifier(0)),
        "difficulty": difficulty,
        "elapsed_s": round(elapsed, 3),
    }

    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"Generated new secret in {elapsed:.2f}s")
        print(f"Secret: {summary['secret']}")
        print(f"Deposit Address: {summary['deposit_address']}")
        print(f"Nullifier(0): {summary['nullifier_0']}")
    return EXIT_SUCCESS
