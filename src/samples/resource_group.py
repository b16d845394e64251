"""
Azure Stack sample for managing resource groups:
  - Create a resource group
  - Update a resource group (add a tag)
  - Create another resource group
  - List resource groups
  - Delete a resource group
"""
from __future__ import annotations

import logging

from src.cleanup import resource_group_scope
from src.naming import random_resource_name
from src.samples.steps import sample_step

logger = logging.getLogger(__name__)

SAMPLE = "resourcegroup"


def run_sample(manager, location: str) -> bool:
    rg_name    = random_resource_name("rgRSMA", 24)
    rg_name2   = random_resource_name("rgRSMA", 24)
    tag_name   = random_resource_name("rgRSTN", 24)
    tag_value  = random_resource_name("rgRSTV", 24)

    with resource_group_scope(manager, rg_name) as lease:
        with sample_step(SAMPLE, "create resource group"):
            logger.info("Creating a resource group with name: %s", rg_name)
            manager.create_resource_group(rg_name, location)
            lease.acquired()
            logger.info("Created a resource group with name: %s", rg_name)

        with sample_step(SAMPLE, "update resource group"):
            logger.info("Updating the resource group with name: %s", rg_name)
            manager.update_resource_group_tags(rg_name, {tag_name: tag_value})
            logger.info("Updated the resource group with name: %s", rg_name)

        with sample_step(SAMPLE, "create second resource group"):
            logger.info("Creating another resource group with name: %s", rg_name2)
            manager.create_resource_group(rg_name2, location)
            logger.info("Created another resource group with name: %s", rg_name2)

        with sample_step(SAMPLE, "list resource groups"):
            logger.info("Listing all resource groups")
            for group in manager.list_resource_groups():
                logger.info("Resource group: %s", group.name)

        with sample_step(SAMPLE, "delete resource group"):
            logger.info("Deleting resource group: %s", rg_name2)
            manager.begin_delete_resource_group(rg_name2)

    return True
