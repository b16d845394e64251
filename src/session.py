"""
Session Bootstrapper.

Binds a service-principal identity to a resolved Azure Stack environment:
  - ClientSecretCredential whose authority is the environment's login endpoint
  - subscription id and tenant id the management clients are scoped to

Nothing here touches the network. The credential fetches its first token
when a management client makes its first call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from urllib.parse import urlparse

from azure.core.credentials import TokenCredential
from azure.identity import ClientSecretCredential

from src.environment import EnvironmentDescriptor
from src.errors import AuthConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    client_id:     str
    client_secret: str = field(repr=False)
    tenant_id:     str


@dataclass(frozen=True)
class StackSession:
    credential:      TokenCredential
    subscription_id: str
    tenant_id:       str
    environment:     EnvironmentDescriptor

    @property
    def base_url(self) -> str:
        return self.environment.resource_manager_endpoint_url

    @property
    def credential_scopes(self) -> list:
        return [self.environment.credential_scope]


def _check_authority(authority: str) -> None:
    parsed = urlparse(authority)
    if parsed.scheme != "https" or not parsed.netloc:
        raise AuthConfigError(
            f"Authority host must be an absolute https URL, got {authority!r}"
        )


def bootstrap_session(
    descriptor:      EnvironmentDescriptor,
    identity:        Identity,
    subscription_id: str,
) -> StackSession:
    """Build an authenticated, subscription-scoped session. No token is requested."""
    missing = [
        name for name, value in (
            ("clientId",       identity.client_id),
            ("clientSecret",   identity.client_secret),
            ("tenantId",       identity.tenant_id),
            ("subscriptionId", subscription_id),
        )
        if not value
    ]
    if missing:
        raise AuthConfigError(f"Missing credential configuration: {missing}")

    authority = descriptor.active_directory_endpoint_url
    _check_authority(authority)

    try:
        credential = ClientSecretCredential(
            tenant_id=identity.tenant_id,
            client_id=identity.client_id,
            client_secret=identity.client_secret,
            authority=authority,
        )
    except ValueError as e:
        raise AuthConfigError(f"Invalid credential configuration: {e}") from e

    logger.info("Azure auth: ClientSecretCredential (service principal) authority=%s", authority)
    return StackSession(
        credential=credential,
        subscription_id=subscription_id,
        tenant_id=identity.tenant_id,
        environment=descriptor,
    )
