"""
CLI command modules.
"""

from wormhole_cli.commands import create_input, execute, secret

__all__ = ["create_input", "execute", "secret"]
