"""
Resolution of target definitions into execution profiles.

Every function here is pure: it reads a TargetDefinition and an
EnvironmentBindings snapshot and returns a new frozen ResolvedProfile or
raises a ResolutionError. Nothing is logged, cached or read from os.environ.
"""

import math
import re

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union

from .constants import (
    HARDHAT_AUTO_GAS_PRICE,
    LOCAL_TARGET_NAME,
    MAX_CREDENTIAL_BYTES,
    NETWORK_DEFAULT_FEE,
)
from .custom_exceptions import (
    InvalidFeeError,
    MalformedCredentialError,
    MissingBindingError,
    MissingCredentialError,
    ResolutionError,
    UnknownTargetError,
)
from .helpers import placeholder_names
from .targets import LOCAL_TARGET, AccountsPolicy, TargetDefinition

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
HEX_CREDENTIAL_PATTERN = re.compile(r"^(0x)?([0-9a-fA-F]*)$")


@dataclass(frozen=True)
class ResolvedProfile:
    name: str
    endpoint: str
    accounts: tuple[str, ...] = ()
    chain_id: Optional[int] = None
    fee: Union[int, float, str] = NETWORK_DEFAULT_FEE
    forking: bool = False

    @property
    def uses_network_fee(self) -> bool:
        return self.fee == NETWORK_DEFAULT_FEE

    @property
    def is_signed(self) -> bool:
        return bool(self.accounts)

    def to_dict(self) -> dict:
        """Hardhat-style network entry for the deployment engine."""
        if self.forking:
            return {"forking": {"url": self.endpoint}}

        network = {
            "url": self.endpoint,
            "accounts": list(self.accounts),
            "gasPrice": HARDHAT_AUTO_GAS_PRICE if self.uses_network_fee else self.fee,
        }
        if self.chain_id is not None:
            network["chainId"] = self.chain_id
        return network


def substitute_endpoint(target: TargetDefinition, env: Mapping[str, str]) -> str:
    """
    Replace every {NAME} placeholder of the endpoint template.

    Raises:
        MissingBindingError: For the first placeholder without a non-empty binding
    """
    for name in placeholder_names(target.endpoint_template, PLACEHOLDER_PATTERN):
        if not env.get(name):
            raise MissingBindingError(target.name, name)

    return PLACEHOLDER_PATTERN.sub(
        lambda match: env[match.group(1)], target.endpoint_template
    )


def validate_credential(target_name: str, source: Optional[str], value) -> str:
    """
    Check that a signing key is a hex string of at most 32 bytes.

    Raises:
        MalformedCredentialError: If the key is empty, not hex or has a bad length
    """
    if not isinstance(value, str):
        raise MalformedCredentialError(target_name, source, "value is not a string")
    if not value.strip():
        raise MalformedCredentialError(target_name, source, "value is empty")
    if value != value.strip():
        raise MalformedCredentialError(
            target_name, source, "value has surrounding whitespace"
        )

    match = HEX_CREDENTIAL_PATTERN.match(value)
    if match is None or not match.group(2):
        raise MalformedCredentialError(target_name, source, "value is not hex encoded")

    digits = match.group(2)
    if len(digits) % 2:
        raise MalformedCredentialError(
            target_name, source, "value has an odd number of hex digits"
        )
    if len(digits) // 2 > MAX_CREDENTIAL_BYTES:
        raise MalformedCredentialError(
            target_name, source, f"value is longer than {MAX_CREDENTIAL_BYTES} bytes"
        )

    return value


def _resolve_single_credential(
    target: TargetDefinition, env: Mapping[str, str]
) -> tuple[str, ...]:
    if target.credential_source is None:
        if target.credential_required:
            raise MissingCredentialError(
                target.name, None, "an undeclared credential variable"
            )
        return ()

    # present-but-empty is malformed, not absent
    value = env.get(target.credential_source)
    if value is None:
        if target.credential_required:
            raise MissingCredentialError(target.name, target.credential_source)
        return ()

    return (validate_credential(target.name, target.credential_source, value),)


def _resolve_account_set(
    target: TargetDefinition, account_set: Optional[Mapping[int, str]]
) -> tuple[str, ...]:
    if not account_set:
        if target.credential_required:
            raise MissingCredentialError(target.name, None)
        return ()

    indices = sorted(account_set)
    if indices != list(range(len(indices))):
        raise MalformedCredentialError(
            target.name, None, f"account indices {indices} must be contiguous from 0"
        )

    return tuple(
        validate_credential(target.name, f"account[{index}]", account_set[index])
        for index in indices
    )


def resolve_accounts(
    target: TargetDefinition,
    env: Mapping[str, str],
    account_set: Optional[Mapping[int, str]] = None,
) -> tuple[str, ...]:
    if target.accounts_policy is AccountsPolicy.NONE:
        return ()
    if target.accounts_policy is AccountsPolicy.SINGLE_CREDENTIAL:
        return _resolve_single_credential(target, env)
    return _resolve_account_set(target, account_set)


def resolve_fee(target: TargetDefinition) -> Union[int, float, str]:
    fee = target.fee_policy

    if fee in (NETWORK_DEFAULT_FEE, HARDHAT_AUTO_GAS_PRICE, None):
        return NETWORK_DEFAULT_FEE

    if isinstance(fee, str):
        try:
            fee = int(fee)
        except ValueError:
            try:
                fee = float(fee)
            except ValueError:
                raise InvalidFeeError(target.name, target.fee_policy)

    if isinstance(fee, bool) or not isinstance(fee, (int, float)):
        raise InvalidFeeError(target.name, target.fee_policy)
    if not math.isfinite(fee) or fee < 0:
        raise InvalidFeeError(target.name, target.fee_policy)

    return fee


def resolve_target(
    target: TargetDefinition,
    env: Mapping[str, str],
    account_set: Optional[Mapping[int, str]] = None,
) -> ResolvedProfile:
    """
    Resolve one target into a complete profile.

    Args:
        target: The target definition
        env: Environment bindings snapshot
        account_set: Index to credential mapping for indexed-account-set targets

    Returns:
        A frozen ResolvedProfile

    Raises:
        ResolutionError: MissingBindingError, MissingCredentialError,
            MalformedCredentialError or InvalidFeeError
    """
    endpoint = substitute_endpoint(target, env)
    accounts = resolve_accounts(target, env, account_set)
    fee = resolve_fee(target)

    return ResolvedProfile(
        name=target.name,
        endpoint=endpoint,
        accounts=accounts,
        chain_id=target.chain_id,
        fee=fee,
        forking=target.forking,
    )


def resolve_all(
    targets: Iterable[TargetDefinition],
    env: Mapping[str, str],
    account_set: Optional[Mapping[int, str]] = None,
) -> dict[str, Union[ResolvedProfile, ResolutionError]]:
    """Resolve every target, keeping each failure next to its target name."""
    results = {}
    for target in targets:
        try:
            results[target.name] = resolve_target(target, env, account_set)
        except ResolutionError as resolution_error:
            results[target.name] = resolution_error
    return results


def find_target(
    targets: Iterable[TargetDefinition], name: str
) -> TargetDefinition:
    targets = list(targets)
    for target in targets:
        if target.name == name:
            return target
    if name == LOCAL_TARGET_NAME:
        return LOCAL_TARGET
    raise UnknownTargetError(name, [target.name for target in targets])


def select_profile(
    targets: Iterable[TargetDefinition],
    env: Mapping[str, str],
    name: Optional[str] = None,
    default_target: str = LOCAL_TARGET_NAME,
    account_set: Optional[Mapping[int, str]] = None,
) -> ResolvedProfile:
    """
    Resolve only the invoked target.

    Other targets are never resolved, so their misconfiguration has no effect.
    """
    target = find_target(targets, default_target if name is None else name)
    return resolve_target(target, env, account_set)


def resolve_named_accounts(
    profile: ResolvedProfile, named_accounts: Mapping[str, int]
) -> dict[str, Optional[str]]:
    return {
        account_name: (
            profile.accounts[index] if 0 <= index < len(profile.accounts) else None
        )
        for account_name, index in named_accounts.items()
    }
