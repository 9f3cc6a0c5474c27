from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .common import parse_flag, require_bool
from .constants import (
    DEFAULT_COMPILER_VERSION,
    DEFAULT_OPTIMIZER_RUNS,
    DEFAULT_REPORT_CURRENCY,
)
from .custom_exceptions import ConfigError
from .custom_types import Config


@dataclass(frozen=True)
class ToolchainSettings:
    """Compiler settings and auxiliary service wiring; a None key means the service is off."""

    compiler_version: str = DEFAULT_COMPILER_VERSION
    optimizer_enabled: bool = False
    optimizer_runs: int = DEFAULT_OPTIMIZER_RUNS
    explorer_api_key: Optional[str] = None
    reporter_api_key: Optional[str] = None
    reporter_currency: str = DEFAULT_REPORT_CURRENCY
    reporting_enabled: bool = False
    gas_price_api: Optional[str] = None
    named_accounts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def verification_enabled(self) -> bool:
        return self.explorer_api_key is not None

    @property
    def price_lookup_enabled(self) -> bool:
        return self.reporting_enabled and self.reporter_api_key is not None

    def to_dict(self) -> dict:
        gas_reporter = {
            "enabled": self.reporting_enabled,
            "currency": self.reporter_currency,
        }
        if self.reporter_api_key is not None:
            gas_reporter["coinmarketcap"] = self.reporter_api_key
        if self.gas_price_api is not None:
            gas_reporter["gasPriceApi"] = self.gas_price_api

        return {
            "solidity": {
                "version": self.compiler_version,
                "settings": {
                    "optimizer": {
                        "enabled": self.optimizer_enabled,
                        "runs": self.optimizer_runs,
                    }
                },
            },
            "namedAccounts": dict(self.named_accounts),
            "etherscan": {"apiKey": self.explorer_api_key},
            "gasReporter": gas_reporter,
        }


def _section(value, section_name: str) -> dict:
    # an empty YAML key loads as None
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f'"{section_name}" must be a mapping, got {value!r}')
    return value


def _optional_key(env: Mapping[str, str], variable_name: Optional[str]) -> Optional[str]:
    if variable_name is None:
        return None
    # empty counts as not set, the service stays disabled
    return env.get(variable_name) or None


def _parse_runs(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"optimizer runs must be a non-negative integer, got {value!r}")
    return value


def _parse_currency(value) -> str:
    if not isinstance(value, str) or len(value) != 3 or not value.isalpha():
        raise ConfigError(f"reporting currency must be a 3-letter code, got {value!r}")
    return value.upper()


def _parse_named_accounts(named_accounts) -> Mapping[str, int]:
    if not isinstance(named_accounts, dict):
        raise ConfigError('"named_accounts" must be a mapping')
    for name, index in named_accounts.items():
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ConfigError(
                f"named account '{name}' must point to a non-negative index, got {index!r}"
            )
    return MappingProxyType(dict(named_accounts))


def resolve_toolchain_settings(config: Config, env: Mapping[str, str]) -> ToolchainSettings:
    """
    Project the static toolchain config and optional service keys from env.

    Args:
        config: Loaded config
        env: Environment bindings snapshot

    Returns:
        ToolchainSettings, with None for every service key that is not set

    Raises:
        ConfigError: If a setting or the reporting flag cannot be parsed
    """
    solidity = config.get("solidity")
    if isinstance(solidity, str):
        # Hardhat shorthand, version only
        solidity = {"version": solidity}
    solidity = _section(solidity, "solidity")
    optimizer = _section(solidity.get("optimizer"), "solidity.optimizer")
    explorer = _section(config.get("explorer"), "explorer")
    gas_reporter = _section(config.get("gas_reporter"), "gas_reporter")

    enabled_env_var = gas_reporter.get("enabled_env_var")
    reporting_enabled = parse_flag(
        enabled_env_var,
        env.get(enabled_env_var) if enabled_env_var else None,
        require_bool(gas_reporter.get("enabled", False), "gas_reporter.enabled"),
    )

    currency = _optional_key(env, gas_reporter.get("currency_env_var")) or gas_reporter.get(
        "currency", DEFAULT_REPORT_CURRENCY
    )

    return ToolchainSettings(
        compiler_version=str(solidity.get("version", DEFAULT_COMPILER_VERSION)),
        optimizer_enabled=require_bool(
            optimizer.get("enabled", False), "solidity.optimizer.enabled"
        ),
        optimizer_runs=_parse_runs(optimizer.get("runs", DEFAULT_OPTIMIZER_RUNS)),
        explorer_api_key=_optional_key(env, explorer.get("api_key_env_var")),
        reporter_api_key=_optional_key(env, gas_reporter.get("api_key_env_var")),
        reporter_currency=_parse_currency(currency),
        reporting_enabled=reporting_enabled,
        gas_price_api=gas_reporter.get("gas_price_api"),
        named_accounts=_parse_named_accounts(
            _section(config.get("named_accounts"), "named_accounts")
        ),
    )
