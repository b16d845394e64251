"""
Scoped acquisition of a sample's primary resource group.

    with resource_group_scope(manager, rg_name) as lease:
        manager.create_resource_group(rg_name, location)
        lease.acquired()
        ...

On every exit path the group is deleted (fire-and-forget). If the body
never reached lease.acquired() there is nothing to delete and that is
logged at INFO. Any other cleanup failure is logged and suppressed, so the
body's own result or exception is what the caller sees.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from azure.core.exceptions import ResourceNotFoundError

from src.errors import CleanupError

logger = logging.getLogger(__name__)


class ResourceGroupLease:
    """Tracks whether the primary resource group was actually created."""

    def __init__(self, manager, name: str) -> None:
        self.manager   = manager
        self.name      = name
        self._created  = False

    @property
    def created(self) -> bool:
        return self._created

    def acquired(self) -> None:
        self._created = True

    def release(self) -> None:
        """Begin deleting the group. Raises CleanupError on any failure."""
        if not self._created:
            raise CleanupError(
                self.name,
                f"Resource group {self.name} was never created",
                never_created=True,
            )
        logger.info("Deleting Resource Group: %s", self.name)
        try:
            self.manager.begin_delete_resource_group(self.name)
        except ResourceNotFoundError as e:
            raise CleanupError(
                self.name,
                f"Resource group {self.name} does not exist",
                never_created=True,
            ) from e
        except Exception as e:
            raise CleanupError(
                self.name,
                f"Failed to delete resource group {self.name}: {e}",
            ) from e
        logger.info("Deletion started for Resource Group: %s", self.name)


@contextmanager
def resource_group_scope(manager, name: str) -> Generator[ResourceGroupLease, None, None]:
    lease = ResourceGroupLease(manager, name)
    try:
        yield lease
    finally:
        try:
            lease.release()
        except CleanupError as e:
            if e.never_created:
                logger.info("Did not create any resources in Azure. No clean up is necessary")
            else:
                logger.error("Cleanup of %s failed: %s", name, e, exc_info=True)
