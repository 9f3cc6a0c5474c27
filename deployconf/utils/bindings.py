import os

from collections.abc import Mapping
from types import MappingProxyType

from dotenv import dotenv_values


class EnvironmentBindings(Mapping):
    """
    Read-only snapshot of environment variables.

    The snapshot is taken once and never follows later changes of the
    process environment. Absent names are a valid state: ``get`` returns None.
    """

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        # values are secrets, show names only
        return f"EnvironmentBindings({sorted(self._values)})"

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None):
        return cls(os.environ if environ is None else environ)

    @classmethod
    def from_env_file(cls, path: str, environ: Mapping[str, str] | None = None):
        """
        Snapshot of a .env file overlaid by the process environment.

        Args:
            path: Path to the .env file
            environ: Environment that takes precedence (defaults to os.environ)

        Returns:
            EnvironmentBindings with the merged values
        """
        file_values = {
            name: value
            for name, value in dotenv_values(path).items()
            if value is not None
        }
        file_values.update(os.environ if environ is None else environ)
        return cls(file_values)
