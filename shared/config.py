"""
Shared configuration management for the RBAC Access Layer.
"""

from typing import Any, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError


DEFAULT_PROVIDER_CLASS = "service_rbac.app.permissions.config_provider.ConfigProvider"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class RbacConfig(BaseConfig):
    """Configuration of the permission matcher.

    Every field can be set from the environment with the ``RBAC_`` prefix,
    e.g. ``RBAC_DEFAULT_ROLE=guest``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Identifier the rule provider uses to locate its configuration source
    autoload_config: str = Field(default="permissions")
    # Dotted path of the role in the user record
    role_field: str = Field(default="role")
    # Role used when the user record carries none
    default_role: str = Field(default="user")
    # Route parameters holding the controller and action names
    controller_key: str = Field(default="controller")
    action_key: str = Field(default="action")
    # Class (or dotted import path) producing the rule list, must extend AbstractProvider
    permissions_provider_class: Any = Field(default=DEFAULT_PROVIDER_CLASS)
    # Explicit rule list, bypasses the provider when set
    permissions: Optional[List[Any]] = Field(default=None)
    # Directory searched by the config file provider
    config_dir: Optional[str] = Field(default=None)
    # URL suffixes recognized as the request extension, e.g. ["json", "csv"]
    extensions: List[str] = Field(default_factory=list)


def get_config(**overrides: Any) -> RbacConfig:
    """Get matcher configuration, applying explicit overrides over the environment.

    Unknown option names raise ConfigurationError.
    """
    unknown = sorted(set(overrides) - set(RbacConfig.model_fields))
    if unknown:
        raise ConfigurationError(
            f"Unknown RBAC configuration options: {', '.join(unknown)}",
            details={"options": unknown}
        )
    return RbacConfig(**overrides)
