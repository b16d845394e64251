"""Unit tests for configuration loading."""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from config.azure_config import REQUIRED_KEYS, RuntimeConfig, load_stack_config
from src.errors import ConfigError

SETTINGS = {
    "clientId": "c1",
    "clientSecret": "s1",
    "subscriptionId": "sub1",
    "tenantId": "t1",
    "resourceManagerUrl": "https://arm.example",
    "location": "local",
}


class TestLoadStackConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "azureAppSpConfig.json")

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, settings):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(settings, f)

    def test_loads_all_keys(self):
        self._write(dict(SETTINGS, clientObjectId="obj-1"))
        cfg = load_stack_config(self.path)

        self.assertEqual(cfg.client_id, "c1")
        self.assertEqual(cfg.subscription_id, "sub1")
        self.assertEqual(cfg.resource_manager_url, "https://arm.example")
        self.assertEqual(cfg.location, "local")
        self.assertEqual(cfg.client_object_id, "obj-1")
        self.assertEqual(cfg.identity.tenant_id, "t1")
        self.assertEqual(cfg.identity.client_secret, "s1")

    def test_object_id_optional_until_required(self):
        self._write(SETTINGS)
        cfg = load_stack_config(self.path)
        self.assertEqual(cfg.client_object_id, "")
        with self.assertRaises(ConfigError):
            cfg.require_object_id()

    def test_reports_every_missing_key(self):
        settings = dict(SETTINGS)
        del settings["tenantId"]
        settings["location"] = ""
        self._write(settings)
        with self.assertRaises(ConfigError) as ctx:
            load_stack_config(self.path)
        self.assertIn("tenantId", str(ctx.exception))
        self.assertIn("location", str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_stack_config(os.path.join(self._tmp.name, "nope.json"))

    def test_invalid_json(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(ConfigError):
            load_stack_config(self.path)

    def test_not_an_object(self):
        self._write([SETTINGS])
        with self.assertRaises(ConfigError):
            load_stack_config(self.path)

    def test_secret_not_in_repr(self):
        self._write(SETTINGS)
        self.assertNotIn("s1", repr(load_stack_config(self.path)))

    def test_path_from_environment(self):
        self._write(SETTINGS)
        with patch.dict(os.environ, {"AZURE_SP_CONFIG_FILE": self.path}):
            cfg = load_stack_config()
        self.assertEqual(cfg.client_id, "c1")

    def test_required_keys(self):
        self.assertEqual(set(REQUIRED_KEYS), set(SETTINGS))


class TestRuntimeConfig(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            runtime = RuntimeConfig()
        self.assertEqual(runtime.sp_config_file, "azureAppSpConfig.json")
        self.assertEqual(runtime.metadata_timeout, 30.0)
        self.assertFalse(runtime.http_logging)

    def test_from_environment(self):
        env = {"STACK_METADATA_TIMEOUT": "5", "STACK_HTTP_LOGGING": "TRUE"}
        with patch.dict(os.environ, env, clear=True):
            runtime = RuntimeConfig()
        self.assertEqual(runtime.metadata_timeout, 5.0)
        self.assertTrue(runtime.http_logging)


if __name__ == '__main__':
    unittest.main()
