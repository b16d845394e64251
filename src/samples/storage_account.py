"""
Azure Stack sample for managing storage accounts:
  - Create a storage account
  - Get and regenerate storage account access keys
  - Create another storage account
  - List storage accounts
  - Delete a storage account
"""
from __future__ import annotations

import logging

from src.cleanup import resource_group_scope
from src.naming import random_resource_name
from src.samples.steps import sample_step

logger = logging.getLogger(__name__)

SAMPLE = "storage"


def _log_keys(keys) -> None:
    # Key values stay out of the log
    for key in keys:
        logger.info("  key: %s permissions=%s", key.key_name, key.permissions)


def run_sample(manager, location: str) -> bool:
    account_name  = random_resource_name("sa", 8)
    account_name2 = random_resource_name("sa2", 8)
    rg_name       = random_resource_name("rgSTMS", 8)

    with resource_group_scope(manager, rg_name) as lease:
        with sample_step(SAMPLE, "create resource group"):
            manager.create_resource_group(rg_name, location)
            lease.acquired()

        with sample_step(SAMPLE, "create storage account"):
            logger.info("Creating a Storage Account")
            account = manager.create_storage_account(rg_name, account_name, location)
            logger.info("Created a Storage Account: %s (%s)", account.name, account.id)

        with sample_step(SAMPLE, "regenerate access key"):
            logger.info("Getting storage account access keys")
            keys = manager.list_storage_account_keys(rg_name, account_name)
            _log_keys(keys)

            logger.info("Regenerating first storage account access key")
            keys = manager.regenerate_key(rg_name, account_name, keys[0].key_name)
            _log_keys(keys)

        with sample_step(SAMPLE, "create second storage account"):
            logger.info("Creating a 2nd Storage Account")
            account2 = manager.create_storage_account(rg_name, account_name2, location)
            logger.info("Created a Storage Account: %s (%s)", account2.name, account2.id)

        with sample_step(SAMPLE, "list storage accounts"):
            logger.info("Listing storage accounts")
            for sa in manager.list_storage_accounts(rg_name):
                logger.info("Storage Account %s created @ %s", sa.name, sa.creation_time)

        with sample_step(SAMPLE, "delete storage account"):
            logger.info("Deleting a storage account - %s created @ %s",
                        account.name, account.creation_time)
            manager.delete_storage_account(rg_name, account_name)
            logger.info("Deleted storage account")

    return True
