"""Connection options for SnowflakeClient"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import SecretStr

from snowclient.errors import ValidationError

KEYPAIR_AUTHENTICATOR = "SNOWFLAKE_JWT"


@dataclass(frozen=True)
class ClientOptions:
    """Immutable connection configuration held by a client for its whole lifetime

    ``account``, ``username`` and ``password`` are required, except that key-pair
    authentication (``authenticator="SNOWFLAKE_JWT"``) needs ``private_key_file``
    instead of a password. ``extra`` is forwarded to the driver unmodified.

    Example:
        >>> opts = ClientOptions(
        ...     account="ab13241.us-east-2.aws",
        ...     username="loader",
        ...     password="...",
        ...     warehouse="LOAD_WH",
        ... )
    """

    account: str
    username: str
    password: Optional[SecretStr] = None
    role: Optional[str] = None
    warehouse: Optional[str] = None
    database: Optional[str] = None
    schema: Optional[str] = None
    authenticator: Optional[str] = None
    private_key_file: Optional[str] = None
    private_key_passphrase_env: Optional[str] = None
    use_keyring: bool = False
    keyring_service: Optional[str] = None
    keyring_username: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate required fields and wrap the password"""
        if isinstance(self.password, str):
            object.__setattr__(self, "password", SecretStr(self.password))

        missing = [name for name in ("account", "username") if not getattr(self, name)]
        if not self.uses_keypair and self.password is None:
            missing.append("password")
        if missing:
            raise ValidationError(
                f"Missing required connection option(s): {', '.join(missing)}"
            )

        if self.uses_keypair and not self.private_key_file:
            raise ValidationError(
                "Keypair authentication requires 'private_key_file' in connection options"
            )

        paramstyle = self.extra.get("paramstyle", "qmark")
        if paramstyle != "qmark":
            raise ValidationError(
                f"paramstyle {paramstyle!r} is not supported; statements are bound with qmark placeholders"
            )

    @property
    def uses_keypair(self) -> bool:
        return (self.authenticator or "").upper() == KEYPAIR_AUTHENTICATOR

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ClientOptions":
        """Build options from a flat mapping such as client keyword arguments

        Keys naming a field set that field, anything else is collected into
        ``extra``. Profile key aliases are resolved by ``snowclient.config``.
        """
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = dict(values.get("extra", {}))

        for key, value in values.items():
            if key == "extra":
                continue
            if key in OPTION_NAMES:
                kwargs[key] = value
            else:
                extra[key] = value

        # Missing required fields are reported by __post_init__
        for name in ("account", "username"):
            kwargs.setdefault(name, "")

        return cls(**kwargs, extra=extra)

    @classmethod
    def from_profile(
        cls,
        profile: str,
        path: Optional[Union[str, Path]] = None,
        **overrides: Any,
    ) -> "ClientOptions":
        """Load options from a connections.toml profile, applying overrides on top"""
        from snowclient.config import load_options

        return load_options(profile, path=path, **overrides)

    def __repr__(self) -> str:
        return (
            f"ClientOptions(account={self.account!r}, username={self.username!r}, "
            f"role={self.role!r}, warehouse={self.warehouse!r}, "
            f"database={self.database!r}, schema={self.schema!r})"
        )


OPTION_NAMES = frozenset(f.name for f in fields(ClientOptions)) - {"extra"}
