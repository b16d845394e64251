"""
Azure Stack Resource Manager  —  src/resource_manager.py

Thin facade over the Azure management SDKs, pointed at an Azure Stack
environment instead of public Azure:
  - ResourceManagementClient   resource groups
  - StorageManagementClient    storage accounts and their access keys
  - KeyVaultManagementClient   key vaults
  - SecretClient               secrets inside a vault (data plane)

Every client is built against the session's ARM base URL and credential
scope. Long-running operations are waited on except resource-group
deletion, which is fire-and-forget.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from azure.core.polling import LROPoller
from azure.keyvault.secrets import SecretClient
from azure.mgmt.keyvault import KeyVaultManagementClient
from azure.mgmt.keyvault.models import (
    AccessPolicyEntry,
    Permissions,
    SecretPermissions,
    Sku as VaultSku,
    SkuFamily,
    SkuName,
    Vault,
    VaultCreateOrUpdateParameters,
    VaultProperties,
)
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.resource.resources.models import ResourceGroup
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.storage.models import (
    Sku as StorageSku,
    StorageAccount,
    StorageAccountCreateParameters,
    StorageAccountKey,
    StorageAccountRegenerateKeyParameters,
)

from src.session import StackSession

logger = logging.getLogger(__name__)

# Azure Stack Hub secret data-plane version
SECRET_API_VERSION = "7.1"

STORAGE_SKU  = "Standard_LRS"
STORAGE_KIND = "Storage"          # general purpose v1


class StackResourceManager:
    """
    Resource-group, storage and key-vault operations for one subscription.
    Clients may be injected; otherwise they are created from the session.
    """

    def __init__(
        self,
        session:         StackSession,
        resource_client: Optional[ResourceManagementClient] = None,
        storage_client:  Optional[StorageManagementClient]  = None,
        keyvault_client: Optional[KeyVaultManagementClient] = None,
        logging_enable:  bool = False,
    ) -> None:
        self._session        = session
        self._logging_enable = logging_enable

        client_kwargs = {
            "base_url":          session.base_url,
            "credential_scopes": session.credential_scopes,
            "logging_enable":    logging_enable,
        }
        self._resource = resource_client or ResourceManagementClient(
            session.credential, session.subscription_id, **client_kwargs
        )
        self._storage = storage_client or StorageManagementClient(
            session.credential, session.subscription_id, **client_kwargs
        )
        self._keyvault = keyvault_client or KeyVaultManagementClient(
            session.credential, session.subscription_id, **client_kwargs
        )

    @property
    def subscription_id(self) -> str:
        return self._session.subscription_id

    # ── Resource groups ───────────────────────────────────────────────────────

    def create_resource_group(self, name: str, location: str) -> ResourceGroup:
        return self._resource.resource_groups.create_or_update(name, {"location": location})

    def update_resource_group_tags(self, name: str, tags: Dict[str, str]) -> ResourceGroup:
        return self._resource.resource_groups.update(name, {"tags": tags})

    def list_resource_groups(self) -> Iterable[ResourceGroup]:
        return self._resource.resource_groups.list()

    def begin_delete_resource_group(self, name: str) -> LROPoller:
        """Start deletion and return without waiting for it to finish."""
        return self._resource.resource_groups.begin_delete(name)

    # ── Storage accounts ──────────────────────────────────────────────────────

    def create_storage_account(self, resource_group: str, name: str, location: str) -> StorageAccount:
        poller = self._storage.storage_accounts.begin_create(
            resource_group,
            name,
            StorageAccountCreateParameters(
                sku=StorageSku(name=STORAGE_SKU),
                kind=STORAGE_KIND,
                location=location,
            ),
        )
        return poller.result()

    def list_storage_account_keys(self, resource_group: str, name: str) -> List[StorageAccountKey]:
        return list(self._storage.storage_accounts.list_keys(resource_group, name).keys)

    def regenerate_key(self, resource_group: str, name: str, key_name: str) -> List[StorageAccountKey]:
        result = self._storage.storage_accounts.regenerate_key(
            resource_group,
            name,
            StorageAccountRegenerateKeyParameters(key_name=key_name),
        )
        return list(result.keys)

    def list_storage_accounts(self, resource_group: str) -> Iterable[StorageAccount]:
        return self._storage.storage_accounts.list_by_resource_group(resource_group)

    def delete_storage_account(self, resource_group: str, name: str) -> None:
        self._storage.storage_accounts.delete(resource_group, name)

    # ── Key vaults ────────────────────────────────────────────────────────────

    def create_vault(self, resource_group: str, name: str, location: str, object_id: str) -> Vault:
        """Standard vault; `object_id` gets every secret permission."""
        tenant_id = self._session.tenant_id
        params = VaultCreateOrUpdateParameters(
            location=location,
            properties=VaultProperties(
                tenant_id=tenant_id,
                sku=VaultSku(family=SkuFamily.A, name=SkuName.STANDARD),
                access_policies=[
                    AccessPolicyEntry(
                        tenant_id=tenant_id,
                        object_id=object_id,
                        permissions=Permissions(secrets=[SecretPermissions.ALL]),
                    )
                ],
                enabled_for_deployment=True,
                enabled_for_template_deployment=True,
            ),
        )
        poller = self._keyvault.vaults.begin_create_or_update(resource_group, name, params)
        return poller.result()

    def delete_vault(self, resource_group: str, name: str) -> None:
        self._keyvault.vaults.delete(resource_group, name)

    def secret_client(self, vault_url: str) -> SecretClient:
        # Azure Stack vault hosts do not match the public-cloud challenge domain
        return SecretClient(
            vault_url=vault_url,
            credential=self._session.credential,
            api_version=SECRET_API_VERSION,
            verify_challenge_resource=False,
            logging_enable=self._logging_enable,
        )
