"""
Sample Orchestrator — main.py

One run, one sample:

  1. CONFIG     : read the service-principal JSON file
  2. DISCOVER   : resolve the Azure Stack environment from its ARM endpoint
  3. AUTH       : bootstrap a ClientSecretCredential session for the subscription
  4. SAMPLE     : run the chosen resource lifecycle (resource group cleaned up on exit)

Any failure is logged and re-raised so the process exits non-zero.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from config.azure_config import RuntimeConfig, StackConfig, load_stack_config
from src.environment import EnvironmentResolver
from src.resource_manager import StackResourceManager
from src.samples import keyvault_secret, resource_group, storage_account
from src.session import StackSession, bootstrap_session

logger = logging.getLogger(__name__)


def _run_resource_group(manager: StackResourceManager, cfg: StackConfig) -> bool:
    return resource_group.run_sample(manager, cfg.location)


def _run_storage(manager: StackResourceManager, cfg: StackConfig) -> bool:
    return storage_account.run_sample(manager, cfg.location)


def _run_secret(manager: StackResourceManager, cfg: StackConfig) -> bool:
    return keyvault_secret.run_sample(manager, cfg.location, cfg.client_object_id)


SAMPLES: Dict[str, Callable[[StackResourceManager, StackConfig], bool]] = {
    resource_group.SAMPLE:  _run_resource_group,
    storage_account.SAMPLE: _run_storage,
    keyvault_secret.SAMPLE: _run_secret,
}


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    )
    for lib in ("azure", "urllib3", "msal"):
        logging.getLogger(lib).setLevel(logging.WARNING)


def build_session(cfg: StackConfig, runtime: RuntimeConfig,
                  resolver: Optional[EnvironmentResolver] = None) -> StackSession:
    resolver    = resolver or EnvironmentResolver(timeout=runtime.metadata_timeout)
    environment = resolver.resolve(cfg.resource_manager_url)
    return bootstrap_session(environment, cfg.identity, cfg.subscription_id)


def main(sample: str, config_path: Optional[str] = None,
         runtime: Optional[RuntimeConfig] = None,
         resolver: Optional[EnvironmentResolver] = None) -> bool:
    try:
        if sample not in SAMPLES:
            raise ValueError(f"Unknown sample {sample!r}; choose from {sorted(SAMPLES)}")

        runtime = runtime or RuntimeConfig()
        cfg     = load_stack_config(config_path or runtime.sp_config_file)
        if sample == keyvault_secret.SAMPLE:
            cfg.require_object_id()

        session = build_session(cfg, runtime, resolver)
        manager = StackResourceManager(session, logging_enable=runtime.http_logging)
        logger.info("Selected subscription: %s", manager.subscription_id)

        return SAMPLES[sample](manager, cfg)
    except Exception as e:
        logger.error("%s", e)
        raise
