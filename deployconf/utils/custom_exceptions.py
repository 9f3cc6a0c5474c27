class BaseCustomException(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(BaseCustomException, ValueError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid configuration: {reason}")


class UnknownTargetError(ConfigError):
    def __init__(self, target: str, known: list[str]):
        super().__init__(
            f"target '{target}' is not declared, known targets: {', '.join(known) or '-'}"
        )
        self.target = target


class NodeError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to query node: {reason}")


class ResolutionError(BaseCustomException):
    """Base class for per-target resolution failures."""

    kind = "ResolutionError"

    def __init__(self, target: str, variable: str | None, reason: str):
        super().__init__(f"Failed to resolve target '{target}': {reason}")
        self.target = target
        self.variable = variable


class MissingBindingError(ResolutionError):
    kind = "MissingBinding"

    def __init__(self, target: str, variable: str):
        super().__init__(
            target, variable, f"environment variable {variable} is not set or empty"
        )


class MissingCredentialError(ResolutionError):
    kind = "MissingCredential"

    def __init__(self, target: str, variable: str | None, source: str | None = None):
        if source is None:
            source = variable if variable is not None else "the account set"
        super().__init__(
            target, variable, f"signing credential from {source} is required"
        )


class MalformedCredentialError(ResolutionError):
    kind = "MalformedCredential"

    def __init__(self, target: str, variable: str | None, reason: str):
        source = variable if variable is not None else "the account set"
        super().__init__(
            target, variable, f"signing credential from {source} is malformed, {reason}"
        )


class InvalidFeeError(ResolutionError):
    kind = "InvalidFee"

    def __init__(self, target: str, fee):
        super().__init__(
            target,
            None,
            f"fee override must be a non-negative number, got {fee!r}",
        )
        self.fee = fee
