"""End-to-end tests for the sample orchestrator with every Azure call mocked."""

import json
import os
import tempfile
import unittest
from unittest.mock import Mock, patch

from azure.core.exceptions import HttpResponseError

from config.azure_config import RuntimeConfig
from src.environment import EnvironmentResolver
from src.errors import ConfigError, DiscoveryError, DiscoveryErrorKind, SampleError
from src.main import main

METADATA = [{
    "authentication": {"audiences": ["aud0"], "loginEndpoint": "https://login.example/"},
    "gallery": "https://gallery.example/",
    "graph": "https://graph.example/",
    "suffixes": {"storage": "core.example.net", "keyVaultDns": "vault.example.net"},
}]

SETTINGS = {
    "clientId": "c1",
    "clientSecret": "s1",
    "subscriptionId": "sub1",
    "tenantId": "t1",
    "resourceManagerUrl": "https://arm.example",
    "location": "local",
}


def _resolver(body=METADATA, status=200):
    client = Mock()
    client.send_request.return_value = Mock(status_code=status, json=Mock(return_value=body))
    return EnvironmentResolver(client=client)


class TestMain(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "azureAppSpConfig.json")
        self._write(SETTINGS)
        self.runtime = RuntimeConfig(sp_config_file=self.path, metadata_timeout=1.0, http_logging=False)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, settings):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(settings, f)

    @patch("src.main.StackResourceManager")
    def test_resource_group_end_to_end(self, manager_cls):
        manager_cls.return_value.list_resource_groups.return_value = []

        self.assertTrue(main("resourcegroup", runtime=self.runtime, resolver=_resolver()))

        session = manager_cls.call_args[0][0]
        self.assertEqual(session.subscription_id, "sub1")
        self.assertEqual(session.tenant_id, "t1")
        self.assertEqual(session.environment.as_dict()["resourceManagerEndpointUrl"], "https://arm.example")
        self.assertEqual(session.environment.active_directory_endpoint_url, "https://login.example/")
        self.assertFalse(manager_cls.call_args[1]["logging_enable"])

    @patch("src.main.StackResourceManager")
    def test_secret_sample_passes_object_id(self, manager_cls):
        self._write(dict(SETTINGS, clientObjectId="obj-1"))
        manager = manager_cls.return_value

        self.assertTrue(main("secret", runtime=self.runtime, resolver=_resolver()))
        self.assertEqual(manager.create_vault.call_args[0][3], "obj-1")

    @patch("src.main.StackResourceManager")
    def test_secret_sample_requires_object_id(self, manager_cls):
        with self.assertRaises(ConfigError):
            main("secret", runtime=self.runtime, resolver=_resolver())
        manager_cls.assert_not_called()

    @patch("src.main.StackResourceManager")
    def test_discovery_failure_is_logged_and_reraised(self, manager_cls):
        with self.assertLogs("src.main", level="ERROR"):
            with self.assertRaises(DiscoveryError) as ctx:
                main("storage", runtime=self.runtime, resolver=_resolver(status=500))
        self.assertEqual(ctx.exception.kind, DiscoveryErrorKind.HTTP_FAILURE)
        manager_cls.assert_not_called()

    @patch("src.main.StackResourceManager")
    def test_sample_failure_propagates(self, manager_cls):
        manager = manager_cls.return_value
        manager.create_storage_account.side_effect = HttpResponseError("quota")

        with self.assertRaises(SampleError):
            main("storage", runtime=self.runtime, resolver=_resolver())
        manager.begin_delete_resource_group.assert_called_once()

    def test_unknown_sample(self):
        with self.assertRaises(ValueError):
            main("compute", runtime=self.runtime, resolver=_resolver())


if __name__ == '__main__':
    unittest.main()
