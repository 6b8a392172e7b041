# User value: This file verifies deploy-time config checks so a misconfigured relay fails at boot, not mid-swap.
import os
import unittest
from unittest.mock import patch

import startup_env
from config import DEFAULT_WORKER_URL, RelayConfig


class StartupEnvUnitTests(unittest.TestCase):
    def test_raw_mode_defaults_pass(self):
        with patch.dict(os.environ, {}, clear=True):
            startup_env.validate_startup_env()

    def test_unknown_mode_rejected(self):
        with patch.dict(os.environ, {"RELAY_MODE": "s3"}, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                startup_env.validate_startup_env()
        self.assertIn("RELAY_MODE must be one of", str(ctx.exception))

    # User value: URL mode cannot boot without somewhere to store images.
    def test_url_mode_requires_bucket(self):
        with patch.dict(os.environ, {"RELAY_MODE": "url"}, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                startup_env.validate_startup_env()
        self.assertIn("GCS_BUCKET_NAME is required", str(ctx.exception))

    def test_url_mode_with_bucket_passes(self):
        env = {"RELAY_MODE": "url", "GCS_BUCKET_NAME": "swaps", "N8N_WEBHOOK_URL": "https://n8n.test/webhook/clothswap"}
        with patch.dict(os.environ, env, clear=True):
            startup_env.validate_startup_env()

    def test_collects_every_error(self):
        env = {"N8N_WEBHOOK_URL": "ftp://nope", "WORKER_TIMEOUT_SEC": "soon", "CORS_ALLOW_ORIGINS": "*"}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                startup_env.validate_startup_env()
        message = str(ctx.exception)
        self.assertIn("N8N_WEBHOOK_URL must start with http:// or https://", message)
        self.assertIn("WORKER_TIMEOUT_SEC must be a number", message)
        self.assertIn("must not contain '*'", message)


    # User value: a bad signed-URL TTL stops the boot in any mode instead of breaking every request later.
    def test_signed_url_ttl_checked_in_raw_mode(self):
        with patch.dict(os.environ, {"GCS_SIGNED_URL_TTL_SEC": "abc"}, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                startup_env.validate_startup_env()
        self.assertIn("GCS_SIGNED_URL_TTL_SEC must be a whole number of seconds", str(ctx.exception))

    def test_signed_url_ttl_rejects_fractions(self):
        with patch.dict(os.environ, {"GCS_SIGNED_URL_TTL_SEC": "0.5"}, clear=True):
            with self.assertRaises(RuntimeError):
                startup_env.validate_startup_env()

    def test_signed_url_ttl_accepts_integral_float(self):
        env = {"RELAY_MODE": "url", "GCS_BUCKET_NAME": "swaps", "GCS_SIGNED_URL_TTL_SEC": "3600.0"}
        with patch.dict(os.environ, env, clear=True):
            startup_env.validate_startup_env()
            self.assertEqual(RelayConfig.from_env().signed_url_ttl_sec, 3600)


class RelayConfigUnitTests(unittest.TestCase):
    # User value: an unparsable TTL never turns config loading into a per-request crash.
    def test_from_env_bad_ttl_falls_back_to_default(self):
        for raw in ("abc", "-5", "0", "inf", ""):
            with patch.dict(os.environ, {"GCS_SIGNED_URL_TTL_SEC": raw}, clear=True):
                self.assertEqual(RelayConfig.from_env().signed_url_ttl_sec, 3600, raw)

    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = RelayConfig.from_env()
        self.assertEqual(cfg.mode, "raw")
        self.assertEqual(cfg.worker_url, DEFAULT_WORKER_URL)
        self.assertIsNone(cfg.worker_timeout_sec)
        self.assertIsNone(cfg.gcs_bucket_name)
        self.assertEqual(cfg.storage_prefix, "clothswap")

    def test_from_env_url_mode(self):
        env = {
            "RELAY_MODE": " URL ",
            "N8N_WEBHOOK_URL": "https://n8n.test/webhook/clothswap",
            "WORKER_TIMEOUT_SEC": "45",
            "GCS_BUCKET_NAME": "swaps",
            "GCS_OBJECT_PREFIX": "/uploads/",
            "GCS_SIGNED_URL_TTL_SEC": "600",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = RelayConfig.from_env()
        self.assertEqual(cfg.mode, "url")
        self.assertEqual(cfg.worker_url, "https://n8n.test/webhook/clothswap")
        self.assertEqual(cfg.worker_timeout_sec, 45.0)
        self.assertEqual(cfg.gcs_bucket_name, "swaps")
        self.assertEqual(cfg.storage_prefix, "uploads")
        self.assertEqual(cfg.signed_url_ttl_sec, 600)


if __name__ == "__main__":
    unittest.main()
