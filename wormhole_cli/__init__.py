"""
Wormhole CLI

Command-line interface for building and executing withdrawal witnesses.

Usage:
    python -m wormhole_cli new-secret
    python -m wormhole_cli create-input --secret 0x... --rpc-url URL --nullifier-address 0x... --withdraw-amount 1000
    python -m wormhole_cli execute --input witness.json --backend risc0
"""
