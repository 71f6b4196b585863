"""
Runtime Configuration

Central configuration for the RPC endpoint, protocol parameters and the
witness builder.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from wormhole.constants import MAX_DEPOSIT, POW_LOG_DIFFICULTY

load_dotenv()


@dataclass
class RpcConfig:
    """Configuration for the JSON-RPC endpoint."""
    url: str = "http://127.0.0.1:8545"
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    proxy: Optional[str] = None


@dataclass
class ProtocolConfig:
    """Protocol parameters shared by witness building and execution."""
    pow_log_difficulty: int = POW_LOG_DIFFICULTY
    nullifier_address: Optional[str] = None
    max_deposit: int = MAX_DEPOSIT


@dataclass
class WitnessConfig:
    """Configuration for the witness builder."""
    block: str = "latest"
    max_index_probe: int = 1024
    fetch_timeout: float = 60.0
    max_workers: int = 3
    record_receipts: bool = True


def _env_bool(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (WORMHOLE_*, also read from .env)
    - YAML file
    - Programmatic construction
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    witness: WitnessConfig = field(default_factory=WitnessConfig)
    debug: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - WORMHOLE_RPC_URL: JSON-RPC endpoint
        - WORMHOLE_RPC_TIMEOUT: Request timeout in seconds
        - WORMHOLE_RPC_MAX_RETRIES: Retries for transport errors
        - WORMHOLE_HTTP_PROXY: HTTP proxy URL
        - WORMHOLE_NULLIFIER_ADDRESS: Nullifier registry address
        - WORMHOLE_POW_LOG_DIFFICULTY: Proof-of-work exponent
        - WORMHOLE_BLOCK: Target block number or tag
        - WORMHOLE_DEBUG: Enable debug logging (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("WORMHOLE_RPC_URL"):
            overrides.setdefault("rpc", {})["url"] = os.getenv("WORMHOLE_RPC_URL")
        if os.getenv("WORMHOLE_RPC_TIMEOUT"):
            overrides.setdefault("rpc", {})["timeout"] = float(os.environ["WORMHOLE_RPC_TIMEOUT"])
        if os.getenv("WORMHOLE_RPC_MAX_RETRIES"):
            overrides.setdefault("rpc", {})["max_retries"] = int(os.environ["WORMHOLE_RPC_MAX_RETRIES"])
        if os.getenv("WORMHOLE_HTTP_PROXY"):
            overrides.setdefault("rpc", {})["proxy"] = os.getenv("WORMHOLE_HTTP_PROXY")

        if os.getenv("WORMHOLE_NULLIFIER_ADDRESS"):
            overrides.setdefault("protocol", {})["nullifier_address"] = os.getenv(
                "WORMHOLE_NULLIFIER_ADDRESS"
            )
        if os.getenv("WORMHOLE_POW_LOG_DIFFICULTY"):
            overrides.setdefault("protocol", {})["pow_log_difficulty"] = int(
                os.environ["WORMHOLE_POW_LOG_DIFFICULTY"]
            )

        if os.getenv("WORMHOLE_BLOCK"):
            overrides.setdefault("witness", {})["block"] = os.getenv("WORMHOLE_BLOCK")

        if os.getenv("WORMHOLE_DEBUG"):
            overrides["debug"] = _env_bool("WORMHOLE_DEBUG")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Defaults overlaid with environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        rpc_data = data.get("rpc") or {}
        protocol_data = data.get("protocol") or {}
        witness_data = data.get("witness") or {}

        return cls(
            rpc=RpcConfig(**rpc_data),
            protocol=ProtocolConfig(**protocol_data),
            witness=WitnessConfig(**witness_data),
            debug=bool(data.get("debug", False)),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        Allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("rpc", "protocol", "witness"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)
        if "debug" in overrides:
            new_config.debug = overrides["debug"]
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "rpc": asdict(self.rpc),
            "protocol": asdict(self.protocol),
            "witness": asdict(self.witness),
            "debug": self.debug,
            "extra": self.extra,
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

