"""
CLI Create-Input Command

Builds a witness from live chain state and prints it as JSON.

Usage:
    wormhole create-input --secret 0x... --rpc-url URL --nullifier-address 0x...
                          --withdraw-amount N [--withdrawal-index I]
                          [--cumulative-withdrawn-amount N] [--block B] [--out PATH]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import replace
from pathlib import Path
from typing import Union

from wormhole.receipts import ReceiptRecorder
from wormhole.rpc import JsonRpcChainSource, JsonRpcClient
from wormhole.schemas.errors import InputMalformedException
from wormhole.witness import WitnessBuilder, WitnessRequest


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def parse_block(value: str) -> Union[int, str]:
    """Decimal numbers and 0x quantities become ints; anything else is a tag."""
    if value.isdigit():
        return int(value)
    if value.startswith("0x"):
        return int(value, 16)
    return value


def create_input_cmd(args: Namespace) -> int:
    """Handle create-input command."""
    config = args.runtime_config

    rpc_config = config.rpc
    if args.rpc_url:
        rpc_config = replace(rpc_config, url=args.rpc_url)
    nullifier_address = args.nullifier_address or config.protocol.nullifier_address
    if not nullifier_address:
        print(
            "Error: --nullifier-address is required (or set WORMHOLE_NULLIFIER_ADDRESS)",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        block = parse_block(args.block or config.witness.block)
    except ValueError as e:
        raise InputMalformedException(f"invalid block: {e}", field_path="block") from e

    request = WitnessRequest.parse(
        secret=args.secret,
        nullifier_address=nullifier_address,
        withdraw_amount=args.withdraw_amount,
        withdrawal_index=args.withdrawal_index,
        cumulative_withdrawn_amount=args.cumulative_withdrawn_amount,
        block=block,
    )

    recorder = ReceiptRecorder() if config.witness.record_receipts else None
    client = JsonRpcClient.from_config(rpc_config, recorder=recorder)
    builder = WitnessBuilder(
        JsonRpcChainSource(client),
        pow_log_difficulty=config.protocol.pow_log_difficulty,
        max_index_probe=config.witness.max_index_probe,
        fetch_timeout=config.witness.fetch_timeout,
        max_workers=config.witness.max_workers,
        max_deposit=config.protocol.max_deposit,
        preflight=not args.no_preflight,
    )

    try:
        witness = builder.build(request)
    finally:
        client.close()
        if recorder and args.receipts:
            Path(args.receipts).write_text(json.dumps(recorder.to_dict_list(), indent=2))
            logger.info(f"Wrote {len(recorder.get_receipts())} RPC receipts to {args.receipts}")

    witness_json = witness.to_json(indent=2)
    if args.out:
        Path(args.out).write_text(witness_json)
        logger.info(f"Wrote witness to {args.out}")
    else:
        print(witness_json)
    return EXIT_SUCCESS
