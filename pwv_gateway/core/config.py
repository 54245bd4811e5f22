# pwv_gateway/core/config.py
"""
Service configuration

Two layers:
- Settings: process-level knobs read from the environment (PWV_*) or a .env file
- VaultConfiguration: the YAML document holding the vault CLI details and the
  bind address, loaded once at startup and never mutated afterwards
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pwv_gateway.core.constants import (
    DEFAULT_BIND_ADDRESS,
    DEFAULT_BIND_PORT,
    DEFAULT_CMD_TIMEOUT_MS,
    DEFAULT_CONFIG_FILE,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    SafeSelector,
)
from pwv_gateway.core.exceptions import ConfigurationError
from pwv_gateway.core.logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PWV_", env_file=".env", extra="ignore")

    CONFIG_FILE: str = DEFAULT_CONFIG_FILE
    LOG_LEVEL: str = "INFO"

    # Admission control
    MAX_CONCURRENT_REQUESTS: int = Field(default=DEFAULT_MAX_CONCURRENT_REQUESTS, gt=0)


class VaultConfiguration(BaseModel):
    """Contents of config.yaml. Field aliases are the on-disk keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    pwv_host: str = Field(default="", alias="password_vault_pwv_host")
    clipasswordsdk_cmd: str = Field(default="", alias="password_vault_clipasswordsdk_cmd")
    clipasswordsdk_cmd_timeout: int = Field(
        default=DEFAULT_CMD_TIMEOUT_MS, alias="password_vault_clipasswordsdk_cmd_timeout", ge=0
    )
    wsu_account_name: str = Field(default="", alias="password_vault_wsu_account_name")
    unmanaged_safe: str = Field(default="", alias="password_vault_pwv_unmanaged_safe")
    unmanaged_platform_id: str = Field(default="", alias="password_vault_pwv_unmanaged_platform_id")
    managed_platform_id: str = Field(default="", alias="password_vault_pwv_managed_platform_id")
    wsu_safe: str = Field(default="", alias="password_vault_pwv_wsu_safe")
    app_id: str = Field(default="", alias="password_vault_app_id")
    username: str = Field(default="", alias="password_vault_pwv_username")
    managed_safe: str = Field(default="", alias="password_vault_pwv_managed_safe")
    bind_address: str = Field(default=DEFAULT_BIND_ADDRESS, alias="service_bind_address")
    bind_port: int = Field(default=DEFAULT_BIND_PORT, alias="service_bind_socket", ge=0, le=65535)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_default(cls, v, info):
        # A key written as "key:" in YAML loads as None
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def safe_name_for(self, selector: SafeSelector) -> str:
        """Concrete vault safe bound to a logical selector"""
        if selector is SafeSelector.MANAGED:
            return self.managed_safe
        return self.unmanaged_safe

    def check_usable(self) -> None:
        """Reject zero-valued required numeric fields"""
        if self.bind_port == 0:
            raise ConfigurationError("Please specify valid socket for router")
        if self.clipasswordsdk_cmd_timeout == 0:
            raise ConfigurationError("Please specify valid command time-out")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def default_config() -> VaultConfiguration:
    """Template written when no configuration file exists yet"""
    return VaultConfiguration()


def save_config(config: VaultConfiguration, filename: Union[str, Path]) -> None:
    path = Path(filename)
    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(config.to_document(), fh, default_flow_style=False, sort_keys=False)
    os.chmod(path, 0o644)


def load_config(filename: Union[str, Path]) -> VaultConfiguration:
    """Read and validate config.yaml. Keys absent from the file keep their template default."""
    path = Path(filename)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed configuration file {path}: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    try:
        return VaultConfiguration.model_validate(document)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


def bootstrap_config(filename: Union[str, Path]) -> VaultConfiguration:
    """
    Load the configuration used for the lifetime of the service.

    When the file does not exist a template is written next to it and
    ConfigurationError is raised so the operator can fill in real values
    before the next start. An existing but broken file is never overwritten.
    """
    path = Path(filename)
    if not path.exists():
        logger.warning(f"Configuration file {path} not found")
        logger.info("Creating new empty configuration file...")
        try:
            save_config(default_config(), path)
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration template {path}: {e}") from e
        raise ConfigurationError(
            f"Please enter details in configuration file {path} according your environment"
        )

    config = load_config(path)
    config.check_usable()
    return config


settings = Settings()
