import pytest

from deployconf.utils.custom_exceptions import (
    BaseCustomException,
    ConfigError,
    InvalidFeeError,
    MalformedCredentialError,
    MissingBindingError,
    MissingCredentialError,
    ResolutionError,
    UnknownTargetError,
)


def test_resolution_errors_share_base():
    errors = [
        MissingBindingError("staging", "API_KEY"),
        MissingCredentialError("staging", "SIGNER_KEY"),
        MalformedCredentialError("staging", "SIGNER_KEY", "value is empty"),
        InvalidFeeError("staging", -1),
    ]
    for error in errors:
        with pytest.raises(ResolutionError):
            raise error
        assert error.target == "staging"


def test_kinds_are_distinct():
    assert MissingBindingError.kind == "MissingBinding"
    assert MissingCredentialError.kind == "MissingCredential"
    assert MalformedCredentialError.kind == "MalformedCredential"
    assert InvalidFeeError.kind == "InvalidFee"


def test_missing_binding_message():
    error = MissingBindingError("staging", "API_KEY")
    assert error.variable == "API_KEY"
    assert "API_KEY" in error.message
    assert str(error) == error.message


def test_unknown_target_is_config_error():
    error = UnknownTargetError("mainnet", ["hardhat", "polygon"])
    assert isinstance(error, ConfigError)
    assert isinstance(error, ValueError)
    assert isinstance(error, BaseCustomException)
    assert "hardhat, polygon" in error.message
