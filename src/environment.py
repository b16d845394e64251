"""
Azure Stack Environment Resolver  —  src/environment.py

An Azure Stack deployment has no fixed endpoint topology. The ARM endpoint
publishes it at:

    GET {armEndpoint}/metadata/endpoints?api-version=2019-10-01

The response is a JSON array of metadata records. Only the first record is
used; later records are ignored. The record is mapped into an
EnvironmentDescriptor holding the eight endpoint roles the SDK clients need.

No retries: without these endpoints nothing else can run, so every failure
surfaces as DiscoveryError and ends startup.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from azure.core import PipelineClient
from azure.core.exceptions import (
    ServiceRequestError,
    ServiceRequestTimeoutError,
    ServiceResponseError,
    ServiceResponseTimeoutError,
)
from azure.core.rest import HttpRequest
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.errors import ConfigError, DiscoveryError, DiscoveryErrorKind

logger = logging.getLogger(__name__)

METADATA_API_VERSION = "2019-10-01"
DEFAULT_TIMEOUT      = 30.0

# Pydantic error types that mean "the field is not there"
_MISSING_ERROR_TYPES = frozenset({"missing", "string_too_short"})


# ── Metadata document ─────────────────────────────────────────────────────────

class AuthenticationMetadata(BaseModel):
    audiences:      List[str]
    login_endpoint: str = Field(alias="loginEndpoint", min_length=1)


class SuffixMetadata(BaseModel):
    storage:       str = Field(min_length=1)
    key_vault_dns: str = Field(alias="keyVaultDns", min_length=1)


class EndpointMetadata(BaseModel):
    """One record of the /metadata/endpoints array. Unknown fields are ignored."""
    authentication: AuthenticationMetadata
    gallery:        str = Field(min_length=1)
    graph:          str = Field(min_length=1)
    suffixes:       SuffixMetadata


# ── Environment descriptor ────────────────────────────────────────────────────

class EnvironmentDescriptor(BaseModel):
    """
    Endpoint URLs and DNS suffixes of one cloud instance.
    Immutable; all eight values must be non-empty.
    as_dict() returns the camelCase mapping used by the Azure SDKs.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    management_endpoint_url:            str = Field(alias="managementEndpointUrl",          min_length=1)
    resource_manager_endpoint_url:      str = Field(alias="resourceManagerEndpointUrl",     min_length=1)
    gallery_endpoint_url:               str = Field(alias="galleryEndpointUrl",             min_length=1)
    active_directory_endpoint_url:      str = Field(alias="activeDirectoryEndpointUrl",     min_length=1)
    active_directory_resource_id:       str = Field(alias="activeDirectoryResourceId",      min_length=1)
    active_directory_graph_resource_id: str = Field(alias="activeDirectoryGraphResourceId", min_length=1)
    storage_endpoint_suffix:            str = Field(alias="storageEndpointSuffix",          min_length=2)
    key_vault_dns_suffix:               str = Field(alias="keyVaultDnsSuffix",              min_length=2)

    @field_validator("storage_endpoint_suffix", "key_vault_dns_suffix")
    @classmethod
    def _dot_prefixed(cls, v: str) -> str:
        if not v.startswith("."):
            raise ValueError(f"DNS suffix must start with '.': {v!r}")
        return v

    @property
    def credential_scope(self) -> str:
        """OAuth scope for ARM calls against this environment."""
        return self.active_directory_resource_id.rstrip("/") + "/.default"

    def as_dict(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


def _pointer(loc) -> str:
    return "/" + "/".join(str(part) for part in loc)


def descriptor_from_metadata(arm_endpoint: str, record: Any) -> EnvironmentDescriptor:
    """Map one metadata record into an EnvironmentDescriptor."""
    if not isinstance(record, dict):
        raise DiscoveryError(
            DiscoveryErrorKind.EMPTY_OR_MALFORMED,
            f"Metadata record is not an object: {record!r}",
        )
    try:
        metadata = EndpointMetadata.model_validate(record)
    except ValidationError as e:
        errors  = e.errors()
        missing = [err for err in errors if err["type"] in _MISSING_ERROR_TYPES]
        if missing:
            path = _pointer(missing[0]["loc"])
            raise DiscoveryError(
                DiscoveryErrorKind.MISSING_FIELD,
                f"Metadata is missing required field {path}",
                path=path,
            ) from e
        raise DiscoveryError(
            DiscoveryErrorKind.EMPTY_OR_MALFORMED,
            f"Metadata has unexpected shape at {_pointer(errors[0]['loc'])}: {errors[0]['msg']}",
        ) from e

    audiences = metadata.authentication.audiences
    if not audiences or not audiences[0]:
        raise DiscoveryError(
            DiscoveryErrorKind.MISSING_FIELD,
            "Metadata is missing required field /authentication/audiences/0",
            path="/authentication/audiences/0",
        )

    return EnvironmentDescriptor.model_validate({
        "managementEndpointUrl":          audiences[0],
        "resourceManagerEndpointUrl":     arm_endpoint,
        "galleryEndpointUrl":             metadata.gallery,
        "activeDirectoryEndpointUrl":     metadata.authentication.login_endpoint,
        "activeDirectoryResourceId":      audiences[0],
        "activeDirectoryGraphResourceId": metadata.graph,
        "storageEndpointSuffix":          "." + metadata.suffixes.storage,
        "keyVaultDnsSuffix":              "." + metadata.suffixes.key_vault_dns,
    })


class EnvironmentResolver:
    """
    Fetches /metadata/endpoints and builds an EnvironmentDescriptor.

    `client` is anything with azure-core's send_request(); when omitted a
    PipelineClient is created per call and closed afterwards.
    """

    def __init__(self, client: Optional[PipelineClient] = None,
                 timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client  = client
        self._timeout = timeout

    def metadata_url(self, arm_endpoint: str) -> str:
        return f"{arm_endpoint.rstrip('/')}/metadata/endpoints?api-version={METADATA_API_VERSION}"

    def resolve(self, arm_endpoint: str) -> EnvironmentDescriptor:
        if not arm_endpoint:
            raise ConfigError("ARM endpoint (resourceManagerUrl) is empty")

        records = self._fetch(arm_endpoint)
        if not isinstance(records, list) or not records:
            raise DiscoveryError(
                DiscoveryErrorKind.EMPTY_OR_MALFORMED,
                f"Failed to find metadata: {records!r}",
            )
        if len(records) > 1:
            logger.debug("Metadata returned %d records; using the first", len(records))

        descriptor = descriptor_from_metadata(arm_endpoint, records[0])
        logger.info("Resolved Azure Stack environment: login=%s audience=%s",
                    descriptor.active_directory_endpoint_url,
                    descriptor.active_directory_resource_id)
        return descriptor

    def _fetch(self, arm_endpoint: str) -> Any:
        url     = self.metadata_url(arm_endpoint)
        request = HttpRequest("GET", url, headers={"accept": "application/json"})
        logger.info("Fetching environment metadata: %s", url)

        client = self._client or PipelineClient(base_url=arm_endpoint)
        try:
            response = client.send_request(
                request,
                connection_timeout=self._timeout,
                read_timeout=self._timeout,
            )
        except (ServiceRequestTimeoutError, ServiceResponseTimeoutError) as e:
            raise DiscoveryError(
                DiscoveryErrorKind.TIMEOUT,
                f"Timed out after {self._timeout}s fetching {url}",
            ) from e
        except (ServiceRequestError, ServiceResponseError) as e:
            raise DiscoveryError(
                DiscoveryErrorKind.HTTP_FAILURE,
                f"Failed to reach {url}: {e}",
            ) from e
        finally:
            if self._client is None:
                client.close()

        status = response.status_code
        if not 200 <= status < 300:
            raise DiscoveryError(
                DiscoveryErrorKind.HTTP_FAILURE,
                f"Failed : HTTP error code : {status}",
                status=status,
            )
        try:
            return response.json()
        except ValueError as e:
            raise DiscoveryError(
                DiscoveryErrorKind.EMPTY_OR_MALFORMED,
                f"Metadata response is not JSON: {e}",
            ) from e


def resolve_environment(arm_endpoint: str, client: Optional[PipelineClient] = None,
                        timeout: float = DEFAULT_TIMEOUT) -> EnvironmentDescriptor:
    return EnvironmentResolver(client=client, timeout=timeout).resolve(arm_endpoint)
