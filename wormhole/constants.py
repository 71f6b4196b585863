"""
Protocol constants.

Salt bytes for every derivation, the Proof-of-Work difficulty and the
transaction type of the withdrawal transaction.
"""

# Salt byte for deriving the deposit (burn) address.
MAGIC_ADDRESS: int = 0xFE

# Salt byte for deriving nullifiers.
MAGIC_NULLIFIER: int = 0x01

# Salt byte for the Proof-of-Work condition on the secret.
MAGIC_POW: int = 0x02

# Exponent of the Proof-of-Work condition: 2 ** 24 = 16 777 216
POW_LOG_DIFFICULTY: int = 24
POW_DIFFICULTY: int = 1 << POW_LOG_DIFFICULTY

# Required secret length for newly created witnesses.
SECRET_LENGTH: int = 32

# 32 * 10**18 wei = 32 ether
MAX_DEPOSIT: int = 32 * 10**18

# Typed transaction envelope byte of the withdrawal transaction.
WORMHOLE_TX_TYPE: int = 5

U256_MAX: int = (1 << 256) - 1

ADDRESS_LENGTH: int = 20
HASH_LENGTH: int = 32
