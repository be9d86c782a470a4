"""Base connector class with shared authentication logic."""

import os
from pathlib import Path
from typing import Optional, Any, Dict
from pydantic import SecretStr
import keyring
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from .options import ClientOptions

# Driver keyword arguments taken straight from ClientOptions
_FORWARDED = ("account", "role", "warehouse", "database", "schema", "authenticator")


class BaseConnector:
    """Base class for Snowflake connectors, turns ClientOptions into driver keyword arguments"""

    def __init__(self, options: ClientOptions) -> None:
        """Initialize the connector and resolve credentials"""
        self.options = options
        self.private_key: Optional[Any] = None
        self._process_auth()

    def _process_auth(self) -> None:
        """Load the private key when the options ask for keypair authentication"""
        if self.options.uses_keypair:
            self._process_keypair_auth()

    def _process_keypair_auth(self) -> None:
        """Process keypair authentication by loading and deserializing the private key with optional passphrase"""
        key_path, passphrase = self._get_key_details()

        try:
            with open(key_path, "rb") as key_file:
                p_key_bytes = key_file.read()

            self.private_key = serialization.load_pem_private_key(
                p_key_bytes,
                password=passphrase.get_secret_value().encode() if passphrase else None,
                backend=default_backend()
            )
        except Exception as e:
            raise IOError(f"Failed to read or decrypt private key from {key_path}: {e}") from e

    def _get_key_details(self) -> tuple[Path, Optional[SecretStr]]:
        """Validate key path and retrieve the private key passphrase from environment variable or keyring"""
        assert self.options.private_key_file is not None
        key_path = Path(self.options.private_key_file).expanduser()

        # Only allow absolute paths or home directory expansion
        if not key_path.is_absolute():
            raise ValueError(
                f"Private key path must be absolute or use ~ for home directory. Got: {self.options.private_key_file}"
            )

        if not key_path.exists():
            raise FileNotFoundError(f"Private key file not found: {key_path}")

        passphrase: Optional[SecretStr] = None

        passphrase_env_var = self.options.private_key_passphrase_env
        if passphrase_env_var:
            env_pass = os.environ.get(passphrase_env_var)
            if env_pass:
                passphrase = SecretStr(env_pass)

        if not passphrase and self.options.use_keyring:
            keyring_service = self.options.keyring_service or f"snowclient.{self.options.account}"
            keyring_username = self.options.keyring_username or self.options.username
            keyring_pass = keyring.get_password(keyring_service, keyring_username)
            if keyring_pass:
                passphrase = SecretStr(keyring_pass)

        return key_path, passphrase

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for snowflake.connector.connect, with unset options omitted"""
        kwargs: Dict[str, Any] = dict(self.options.extra)
        kwargs["user"] = self.options.username
        for name in _FORWARDED:
            value = getattr(self.options, name)
            if value is not None:
                kwargs[name] = value

        if self.private_key is not None:
            kwargs["private_key"] = self.private_key
        elif self.options.password is not None:
            kwargs["password"] = self.options.password.get_secret_value()

        # ? and :n placeholders are bound server-side
        kwargs["paramstyle"] = "qmark"
        return kwargs
