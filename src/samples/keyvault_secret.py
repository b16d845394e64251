"""
Azure Stack Key Vault sample for managing secrets:
  - Create a key vault
  - Set a secret
  - Get a secret
  - Delete a key vault

The service principal's object id is granted all secret permissions on the
new vault so the same credential can use the data plane.
"""
from __future__ import annotations

import logging

from src.cleanup import resource_group_scope
from src.naming import random_resource_name, random_secret_value
from src.samples.steps import sample_step

logger = logging.getLogger(__name__)

SAMPLE = "secret"


def run_sample(manager, location: str, object_id: str) -> bool:
    vault_name   = random_resource_name("kv", 8)
    secret_name  = random_resource_name("s", 8)
    secret_value = random_secret_value()
    rg_name      = random_resource_name("rgkvs", 16)

    with resource_group_scope(manager, rg_name) as lease:
        with sample_step(SAMPLE, "create resource group"):
            manager.create_resource_group(rg_name, location)
            lease.acquired()

        with sample_step(SAMPLE, "create key vault"):
            logger.info("Creating a key vault with name: %s", vault_name)
            vault = manager.create_vault(rg_name, vault_name, location, object_id)
            logger.info("Created a key vault with name: %s uri=%s",
                        vault_name, vault.properties.vault_uri)

        secret_client = manager.secret_client(vault.properties.vault_uri)

        with sample_step(SAMPLE, "set secret"):
            logger.info("Setting a secret with name: %s", secret_name)
            secret_client.set_secret(secret_name, secret_value)
            logger.info("Set the secret with name: %s", secret_name)

        with sample_step(SAMPLE, "get secret"):
            logger.info("Getting the secret with name: %s", secret_name)
            secret = secret_client.get_secret(secret_name)
            if secret.value != secret_value:
                logger.warning("Secret %s read back with a different value", secret_name)
            logger.info("Got the secret with name: %s", secret_name)

        with sample_step(SAMPLE, "delete key vault"):
            logger.info("Deleting key vault with name: %s", vault_name)
            manager.delete_vault(rg_name, vault_name)
            logger.info("Deleted key vault with name: %s", vault_name)

    return True
