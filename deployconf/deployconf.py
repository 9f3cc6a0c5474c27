import sys
import time
import argparse
import json
import os

from .utils.bindings import EnvironmentBindings
from .utils.common import load_config, log_binding, mask_text
from .utils.constants import DEFAULT_CONFIG_PATH, START_TIME
from .utils.custom_exceptions import BaseCustomException, ResolutionError
from .utils.helpers import create_dirs
from .utils.logger import logger
from .utils.node_handler import verify_chain_id
from .utils.resolver import resolve_all, resolve_named_accounts, select_profile
from .utils.targets import get_default_target_name, parse_targets
from .utils.toolchain import resolve_toolchain_settings

__version__ = "0.1.0"


def load_bindings(env_file):
    if env_file is None:
        return EnvironmentBindings.from_environ()

    if not os.path.isfile(env_file):
        logger.warn(f"Env file {env_file} not found, using process environment only")
        return EnvironmentBindings.from_environ()

    logger.info(f"Loading env file {env_file}...")
    return EnvironmentBindings.from_env_file(env_file)


def show_toolchain(settings, config, env):
    logger.divider()
    logger.okay("Compiler version", settings.compiler_version)
    logger.okay(
        "Optimizer",
        f"{'enabled' if settings.optimizer_enabled else 'disabled'}, {settings.optimizer_runs} runs",
    )

    explorer_var = (config.get("explorer") or {}).get("api_key_env_var")
    if explorer_var:
        log_binding(env, explorer_var, masked=True)
    if not settings.verification_enabled:
        logger.warn("Explorer verification is disabled, no API key")

    if settings.reporting_enabled:
        logger.okay("Gas reporting currency", settings.reporter_currency)
        if not settings.price_lookup_enabled:
            logger.warn("Gas reporting runs without price lookup, no API key")
    else:
        logger.info("Gas reporting is disabled")


def show_profile(profile, settings):
    logger.divider()
    logger.okay("Target", profile.name)
    logger.okay("Endpoint", mask_text(profile.endpoint))
    if profile.forking:
        logger.info("Endpoint is used as a fork upstream")
    if profile.chain_id is not None:
        logger.okay("Chain ID", profile.chain_id)
    else:
        logger.warn("Chain ID isn't set")

    if profile.accounts:
        for index, account in enumerate(profile.accounts):
            logger.okay(f"Account #{index}", mask_text(account))
    else:
        logger.warn("No signing accounts, the profile is read-only")

    for account_name, account in resolve_named_accounts(
        profile, settings.named_accounts
    ).items():
        if account is None:
            logger.warn(f"Named account '{account_name}' has no credential")
        else:
            logger.okay(f"Named account '{account_name}'", mask_text(account))

    logger.okay(
        "Fee", "network default" if profile.uses_network_fee else profile.fee
    )


def build_account_set(env, account_env_vars):
    if not account_env_vars:
        return None

    account_set = {}
    for index, variable_name in enumerate(account_env_vars):
        value = log_binding(env, variable_name, masked=True)
        if value is None:
            logger.warn(f"Account #{index} is missing, indexed targets will fail")
            continue
        account_set[index] = value
    return account_set


def report_targets(results):
    report = []
    for index, (name, result) in enumerate(results.items()):
        if isinstance(result, ResolutionError):
            report.append([index + 1, name, "-", "-", "-", "-", result.kind])
            logger.log(str(result))
            continue

        report.append(
            [
                index + 1,
                name,
                mask_text(result.endpoint),
                result.chain_id if result.chain_id is not None else "-",
                len(result.accounts),
                "auto" if result.uses_network_fee else result.fee,
                "ok",
            ]
        )

    logger.divider()
    logger.report_table(report)


def export_config(path, default_network, profiles, settings):
    document = settings.to_dict()
    document["defaultNetwork"] = default_network
    document["networks"] = {profile.name: profile.to_dict() for profile in profiles}

    create_dirs(path)
    with open(path, "w") as f:
        json.dump(document, f, indent=2)
    logger.warn(f"Exported config with unmasked credentials to {path}")


def process_config(
    path: str,
    network: str | None,
    resolve_every_target: bool,
    env_file: str | None,
    export_path: str | None,
    check_chain_id: bool,
    account_env_vars: list[str] | None = None,
):
    logger.info(f"Loading config {path}...")
    config = load_config(path)
    env = load_bindings(env_file)

    targets = parse_targets(config)
    default_network = get_default_target_name(config)
    settings = resolve_toolchain_settings(config, env)
    show_toolchain(settings, config, env)
    account_set = build_account_set(env, account_env_vars)

    profiles = {}
    if resolve_every_target:
        results = resolve_all(targets, env, account_set)
        report_targets(results)
        profiles = {
            name: result
            for name, result in results.items()
            if not isinstance(result, ResolutionError)
        }

    invoked = default_network if network is None else network
    logger.info(f"Resolving target {invoked}...")
    profile = select_profile(targets, env, invoked, account_set=account_set)
    profiles[profile.name] = profile
    show_profile(profile, settings)

    if check_chain_id:
        verify_chain_id(profile)

    if export_path is not None:
        export_config(export_path, invoked, profiles.values(), settings)


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--version", "-V", action="store_true", help="Display version information"
    )
    parser.add_argument(
        "path", nargs="?", default=DEFAULT_CONFIG_PATH, help="Path to YAML or JSON config"
    )
    parser.add_argument(
        "--network",
        "-n",
        default=None,
        help="Target to resolve, defaults to the config's default_network",
    )
    parser.add_argument(
        "--all",
        "-A",
        dest="resolve_every_target",
        help="Resolve every declared target and print a status table",
        action="store_true",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file, the process environment takes precedence",
    )
    parser.add_argument(
        "--export",
        "-E",
        dest="export_path",
        default=None,
        help="Write the resolved configuration as JSON",
    )
    parser.add_argument(
        "--verify-chain-id",
        help="Ask the resolved endpoint for its chain ID and compare",
        action="store_true",
    )
    parser.add_argument(
        "--account-env",
        dest="account_env_vars",
        action="append",
        default=None,
        metavar="VAR",
        help="Env variable holding the next key of the indexed account set, repeat in index order",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    if args.version:
        print(f"Deployconf {__version__}")
        return
    logger.info("Welcome to Deployconf!")
    logger.divider()

    if not os.path.isfile(args.path):
        logger.error(f"Specified config path {args.path} not found")
        sys.exit(1)

    try:
        process_config(
            args.path,
            args.network,
            args.resolve_every_target,
            args.env_file,
            args.export_path,
            args.verify_chain_id,
            args.account_env_vars,
        )
    except BaseCustomException as custom_exc:
        logger.error(custom_exc.message)
        sys.exit(1)

    execution_time = time.time() - START_TIME

    logger.okay(f"Done in {round(execution_time, 3)}s ✨")


if __name__ == "__main__":
    main()
