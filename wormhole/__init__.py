"""
Wormhole withdrawal protocol.

Private withdrawals from deposit addresses derived from a secret, verified by a
backend-portable program over Merkle-Patricia state proofs.
"""

__version__ = "0.12.5"
