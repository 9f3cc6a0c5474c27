import json
import os

from collections.abc import Hashable

import requests
import yaml

from .constants import FALSY_FLAGS, TRUTHY_FLAGS
from .logger import logger
from .custom_types import Config
from .custom_exceptions import ConfigError, NodeError


def log_binding(env, variable_name, masked=False):
    value = env.get(variable_name)

    if value:
        printable_value = mask_text(value) if masked else value
        logger.okay(f"{variable_name}", printable_value)
    else:
        logger.info(f"{variable_name} var is not set")

    return value


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses a key repeated within one mapping."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            # merge keys and unhashable keys are handled by SafeLoader
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise ConfigError(
                    f"key {key!r} is declared more than once (line {key_node.start_mark.line + 1})"
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_keys(pairs):
    mapping = {}
    for key, value in pairs:
        if key in mapping:
            raise ConfigError(f"key {key!r} is declared more than once")
        mapping[key] = value
    return mapping


def load_config(path: str) -> Config:
    extension = os.path.splitext(path)[1].lower()

    with open(path, mode="r") as config_file:
        if extension == ".json":
            config = json.load(config_file, object_pairs_hook=_reject_duplicate_keys)
        elif extension in (".yaml", ".yml"):
            config = yaml.load(config_file, Loader=UniqueKeyLoader)
        else:
            raise ConfigError(f"Unsupported config file extension '{extension}'")

    if config is None:
        raise ConfigError(f"{path} is empty or contains only comments")
    if not isinstance(config, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    _check_keys_are_strings(config.get("networks") or {}, "networks")
    _check_keys_are_strings(config.get("named_accounts") or {}, "named_accounts")

    return config


def _check_keys_are_strings(section: dict, section_name: str) -> None:
    # YAML turns unquoted keys like 137 or 0x89 into integers
    if not isinstance(section, dict):
        raise ConfigError(f'"{section_name}" must be a mapping')
    for key in section:
        if not isinstance(key, str):
            raise ConfigError(
                f"key {key!r} in {section_name} was parsed as integer, quote it in the config"
            )


def require_bool(value, setting_name: str) -> bool:
    # a quoted "false" in the config would otherwise read as True
    if not isinstance(value, bool):
        raise ConfigError(f"{setting_name} must be true or false, got {value!r}")
    return value


def parse_flag(variable_name: str, value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in TRUTHY_FLAGS:
        return True
    if normalized in FALSY_FLAGS:
        return False
    raise ConfigError(f"{variable_name}={value!r} is not a boolean flag")


def _handle_request_errors(error_class):
    """Decorator to handle common HTTP request errors and convert them to custom exceptions."""

    def decorator(func):
        def wrapper(*args, **kwargs):
            try:
                response = func(*args, **kwargs)
                response.raise_for_status()
                return response
            except requests.exceptions.HTTPError as http_err:
                raise error_class(f"HTTP error occurred: {http_err}")
            except requests.exceptions.ConnectionError as conn_err:
                raise error_class(f"Connection error occurred: {conn_err}")
            except requests.exceptions.Timeout as timeout_err:
                raise error_class(f"Timeout error occurred: {timeout_err}")
            except requests.exceptions.RequestException as req_err:
                raise error_class(f"Request exception occurred: {req_err}")

        return wrapper

    return decorator


@_handle_request_errors(NodeError)
def pull(url, payload=None, headers=None, timeout=10):
    logger.log(f"Pull: {mask_text(url)}")
    return requests.post(url, data=payload, headers=headers, timeout=timeout)


def mask_text(text, mask_start=3, mask_end=3):
    text_length = len(text)
    if text_length <= mask_start + mask_end:
        return "*" * text_length
    mask = "*" * (text_length - mask_start - mask_end)
    return text[:mask_start] + mask + text[text_length - mask_end :]
