from typing import TypedDict, NotRequired


class OptimizerConfig(TypedDict):
    enabled: bool
    runs: int


class SolidityConfig(TypedDict):
    version: str
    optimizer: NotRequired[OptimizerConfig]


class ExplorerConfig(TypedDict):
    api_key_env_var: str


class GasReporterConfig(TypedDict):
    enabled: NotRequired[bool]
    enabled_env_var: NotRequired[str]
    currency: NotRequired[str]
    currency_env_var: NotRequired[str]
    api_key_env_var: NotRequired[str]
    gas_price_api: NotRequired[str]


class NetworkConfig(TypedDict):
    url: str
    chain_id: NotRequired[int]
    credential_env_var: NotRequired[str]
    credential_required: NotRequired[bool]
    accounts: NotRequired[str]
    gas_price: NotRequired[int | float | str]
    forking: NotRequired[bool]


class Config(TypedDict):
    networks: dict[str, NetworkConfig]
    default_network: NotRequired[str]
    solidity: NotRequired[SolidityConfig]
    named_accounts: NotRequired[dict[str, int]]
    explorer: NotRequired[ExplorerConfig]
    gas_reporter: NotRequired[GasReporterConfig]
