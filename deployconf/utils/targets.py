from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from .common import require_bool
from .constants import LOCAL_RPC_URL, LOCAL_TARGET_NAME, NETWORK_DEFAULT_FEE
from .custom_exceptions import ConfigError
from .custom_types import Config, NetworkConfig


class AccountsPolicy(str, Enum):
    NONE = "none"
    SINGLE_CREDENTIAL = "single-credential"
    INDEXED_ACCOUNT_SET = "indexed-account-set"


@dataclass(frozen=True)
class TargetDefinition:
    """One named deployment environment, as declared in the config."""

    name: str
    endpoint_template: str
    chain_id: Optional[int] = None
    credential_source: Optional[str] = None  # env variable holding the signing key
    credential_required: bool = False
    # NETWORK_DEFAULT_FEE or a numeric override, checked at resolution time
    fee_policy: Union[int, float, str] = NETWORK_DEFAULT_FEE
    accounts_policy: AccountsPolicy = AccountsPolicy.NONE
    forking: bool = False


LOCAL_TARGET = TargetDefinition(name=LOCAL_TARGET_NAME, endpoint_template=LOCAL_RPC_URL)


def parse_accounts_policy(target_name: str, value) -> AccountsPolicy:
    try:
        return AccountsPolicy(value)
    except ValueError:
        allowed = ", ".join(policy.value for policy in AccountsPolicy)
        raise ConfigError(
            f"target '{target_name}' has unknown accounts policy {value!r}, expected one of: {allowed}"
        )


def parse_target(name: str, network: NetworkConfig) -> TargetDefinition:
    if not isinstance(network, dict):
        raise ConfigError(f"target '{name}' must be a mapping")

    url = network.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigError(f"target '{name}' has no endpoint url")

    chain_id = network.get("chain_id")
    if chain_id is not None and (
        isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0
    ):
        raise ConfigError(f"target '{name}' has invalid chain id {chain_id!r}")

    credential_source = network.get("credential_env_var")
    if credential_source is not None and not isinstance(credential_source, str):
        raise ConfigError(
            f"target '{name}' credential_env_var must be a variable name"
        )

    if "accounts" in network:
        accounts_policy = parse_accounts_policy(name, network["accounts"])
    elif credential_source is not None:
        accounts_policy = AccountsPolicy.SINGLE_CREDENTIAL
    else:
        accounts_policy = AccountsPolicy.NONE

    credential_required = require_bool(
        network.get("credential_required", False), f"{name}.credential_required"
    )
    if (
        credential_required
        and accounts_policy is AccountsPolicy.SINGLE_CREDENTIAL
        and credential_source is None
    ):
        raise ConfigError(
            f"target '{name}' requires a credential but declares no credential_env_var"
        )

    return TargetDefinition(
        name=name,
        endpoint_template=url,
        chain_id=chain_id,
        credential_source=credential_source,
        credential_required=credential_required,
        fee_policy=network.get("gas_price", NETWORK_DEFAULT_FEE),
        accounts_policy=accounts_policy,
        forking=require_bool(network.get("forking", False), f"{name}.forking"),
    )


def check_unique_names(targets: Iterable[TargetDefinition]) -> tuple[TargetDefinition, ...]:
    """
    Ensure every target name is declared once.

    Raises:
        ConfigError: If two targets share a name
    """
    seen = set()
    checked = []
    for target in targets:
        if target.name in seen:
            raise ConfigError(f"target '{target.name}' is declared more than once")
        seen.add(target.name)
        checked.append(target)
    return tuple(checked)


def parse_targets(config: Config) -> tuple[TargetDefinition, ...]:
    networks = config.get("networks")
    if not isinstance(networks, dict) or not networks:
        raise ConfigError('"networks" section is missing or empty')

    return check_unique_names(
        parse_target(name, network) for name, network in networks.items()
    )


def get_default_target_name(config: Config) -> str:
    return config.get("default_network", LOCAL_TARGET_NAME)
