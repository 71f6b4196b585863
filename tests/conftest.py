"""
Shared pytest setup for the wormhole test suite.

Puts the repo root and tests/ on sys.path so `fixtures` imports resolve,
and exposes chain and secret fixtures built on tests/fixtures.
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_TESTS_ROOT = Path(__file__).resolve().parent

for _path in (str(_TESTS_ROOT.parent), str(_TESTS_ROOT)):
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_chain = importlib.import_module("fixtures.chain")
_common = importlib.import_module("fixtures.common")


# =============================================================================
# Chain and secret fixtures
# =============================================================================

@pytest.fixture
def chain():
    """Empty in-memory chain with the nullifier registry deployed."""
    return _chain.InMemoryChain()


@pytest.fixture
def secret():
    """Fresh 32-byte secret that passes proof-of-work at LOW_DIFFICULTY."""
    return _common.make_secret()


@pytest.fixture
def funded_chain(chain):
    """Chain whose block 1 credits TEST_SECRET's deposit address with 100."""
    _common.fund_deposit(chain, _common.TEST_SECRET, 100)
    return chain


# =============================================================================
# Acceptance check assertions
# =============================================================================

def _only_check(result, check_id):
    matching = [c for c in result.checks if c.check_id == check_id]
    assert len(matching) == 1, f"check '{check_id}' not in {[c.check_id for c in result.checks]}"
    return matching[0]


@pytest.fixture
def assert_check_passed():
    def _assert(result, check_id: str):
        check = _only_check(result, check_id)
        assert check.ok, f"check '{check_id}' failed: {check.message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    def _assert(result, check_id: str):
        check = _only_check(result, check_id)
        assert not check.ok, f"check '{check_id}' unexpectedly passed"
    return _assert
