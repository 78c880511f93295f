"""Configuration objects for artifact-renamer.

Signing credentials are passed explicitly into the build process. The only
place that reads them from the process environment is the command line tool,
which calls `SigningConfig.from_env` with `os.environ`.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace

__all__ = [
    "SigningConfig",
    "RenameConfig",
    "KEYSTORE_PASSWORD_ENV",
    "KEY_ALIAS_ENV",
    "KEY_PASSWORD_ENV",
]

KEYSTORE_PASSWORD_ENV = "KEYSTORE_PASSWORD"
KEY_ALIAS_ENV = "KEY_ALIAS"
KEY_PASSWORD_ENV = "KEY_PASSWORD"

MASK = "****"


@dataclass(frozen=True)
class SigningConfig:
    """Credentials used by the release signing configuration.

    The defaults are the placeholder values used when the corresponding
    environment variable is not set.
    """

    store_file: str = "release.keystore"
    """Keystore path, relative to the android app directory."""

    store_password: str = "your_keystore_password"
    key_alias: str = "release"
    key_password: str = "your_key_password"

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "SigningConfig":
        """Build a config from environment variables, using defaults if unset."""
        defaults = cls()
        return cls(
            store_file=defaults.store_file,
            store_password=environ.get(KEYSTORE_PASSWORD_ENV)
            or defaults.store_password,
            key_alias=environ.get(KEY_ALIAS_ENV) or defaults.key_alias,
            key_password=environ.get(KEY_PASSWORD_ENV) or defaults.key_password,
        )

    def to_env(self) -> dict[str, str]:
        """Return the environment handed to the assembly subprocess."""
        return {
            KEYSTORE_PASSWORD_ENV: self.store_password,
            KEY_ALIAS_ENV: self.key_alias,
            KEY_PASSWORD_ENV: self.key_password,
        }

    def masked(self) -> "SigningConfig":
        """Return a copy that is safe to print."""
        return replace(self, store_password=MASK, key_password=MASK)


@dataclass
class RenameConfig:
    """Configuration for the rename step."""

    overwrite: bool = True
    """Replace an existing target artifact instead of failing."""
