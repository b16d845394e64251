"""
Azure Stack sample configuration.

Two sources:
  1. Environment (.env honoured): where the SP config file lives, plus
     runtime knobs (metadata timeout, SDK HTTP logging).
  2. The service-principal JSON file (azureAppSpConfig.json):

        {
          "clientId": "...",
          "clientSecret": "...",
          "subscriptionId": "...",
          "tenantId": "...",
          "resourceManagerUrl": "https://management.local.azurestack.external",
          "location": "local",
          "clientObjectId": "..."        # key-vault sample only
        }

Missing keys are reported together as one ConfigError.
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from src.errors import ConfigError
from src.session import Identity

load_dotenv(override=False)

REQUIRED_KEYS = (
    "clientId", "clientSecret", "subscriptionId",
    "tenantId", "resourceManagerUrl", "location",
)


@dataclass(frozen=True)
class RuntimeConfig:
    sp_config_file:   str   = field(default_factory=lambda: os.getenv("AZURE_SP_CONFIG_FILE", "azureAppSpConfig.json"))
    metadata_timeout: float = field(default_factory=lambda: float(os.getenv("STACK_METADATA_TIMEOUT", "30")))
    http_logging:     bool  = field(default_factory=lambda: os.getenv("STACK_HTTP_LOGGING", "false").lower() == "true")


@dataclass(frozen=True)
class StackConfig:
    client_id:            str
    client_secret:        str = field(repr=False)
    subscription_id:      str
    tenant_id:            str
    resource_manager_url: str
    location:             str
    client_object_id:     str = ""

    @property
    def identity(self) -> Identity:
        return Identity(
            client_id=self.client_id,
            client_secret=self.client_secret,
            tenant_id=self.tenant_id,
        )

    def require_object_id(self) -> None:
        """The key-vault sample grants secret access to this object id."""
        if not self.client_object_id:
            raise ConfigError("Missing Azure configuration: ['clientObjectId']")


def load_stack_config(path: Optional[str] = None) -> StackConfig:
    """Read the service-principal JSON file. Every required key must be present and non-empty."""
    cfg_path = Path(path or RuntimeConfig().sp_config_file)
    try:
        with open(cfg_path, encoding="utf-8") as f:
            settings = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {cfg_path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {cfg_path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a JSON object")

    missing = [k for k in REQUIRED_KEYS if not settings.get(k)]
    if missing:
        raise ConfigError(f"Missing Azure configuration in {cfg_path}: {missing}")

    return StackConfig(
        client_id=str(settings["clientId"]),
        client_secret=str(settings["clientSecret"]),
        subscription_id=str(settings["subscriptionId"]),
        tenant_id=str(settings["tenantId"]),
        resource_manager_url=str(settings["resourceManagerUrl"]),
        location=str(settings["location"]),
        client_object_id=str(settings.get("clientObjectId") or ""),
    )
