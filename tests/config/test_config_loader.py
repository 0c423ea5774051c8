"""
Tests for the schema-driven configuration loader.

This module tests source precedence (defaults, dotenv file, environment,
host settings, CLI), value normalization and validation errors.
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from noverna_db.config import ConfigError, ConfigLoader, ConfigSchema
from noverna_db.database import database_config_from_schema
from noverna_db.models import DatabaseConfig


class TestConfigLoader(unittest.TestCase):
    """Test cases for ConfigLoader.load."""

    def setUp(self):
        """Start every test from an environment without NOVERNA_ variables."""
        patcher = patch.dict(os.environ, {}, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_defaults(self):
        """Test that schema defaults apply when no source sets a value."""
        config = ConfigLoader.load(env_file=None)

        self.assertEqual(config.db_host, "localhost")
        self.assertEqual(config.db_port, 5432)
        self.assertEqual(config.db_name, "noverna")
        self.assertEqual(config.db_user, "postgres")
        self.assertEqual(config.db_password, "")
        self.assertIsNone(config.db_url)
        self.assertEqual(config.max_connections, 20)
        self.assertEqual(config.idle_timeout_ms, 30000)
        self.assertEqual(config.connection_timeout_ms, 2000)

    def test_environment_variables(self):
        """Test that environment variables are read and coerced."""
        os.environ.update({
            "NOVERNA_DB_HOST": "db.internal",
            "NOVERNA_DB_PORT": "6543",
            "NOVERNA_DB_NAME": "game",
            "NOVERNA_DB_USER": "server",
            "NOVERNA_DB_PASSWORD": "secret",
            "NOVERNA_DB_MAX_CONNECTIONS": "5",
            "NOVERNA_DB_IDLE_TIMEOUT": "60000",
            "NOVERNA_DB_CONNECTION_TIMEOUT": "500",
        })

        config = ConfigLoader.load(env_file=None)

        self.assertEqual(config.db_host, "db.internal")
        self.assertEqual(config.db_port, 6543)
        self.assertEqual(config.db_name, "game")
        self.assertEqual(config.db_user, "server")
        self.assertEqual(config.db_password, "secret")
        self.assertEqual(config.max_connections, 5)
        self.assertEqual(config.idle_timeout_ms, 60000)
        self.assertEqual(config.connection_timeout_ms, 500)

    def test_whitespace_and_empty_environment_values(self):
        """Test that values are stripped and empty values fall back to defaults."""
        os.environ["NOVERNA_DB_HOST"] = "  db.internal  "
        os.environ["NOVERNA_DB_NAME"] = "   "

        config = ConfigLoader.load(env_file=None)

        self.assertEqual(config.db_host, "db.internal")
        self.assertEqual(config.db_name, "noverna")

    def test_dotenv_file_is_lowest_source(self):
        """Test that the dotenv file fills gaps but never beats the environment."""
        os.environ["NOVERNA_DB_HOST"] = "from-env"
        with tempfile.NamedTemporaryFile("w", suffix=".env", delete=False) as f:
            f.write("NOVERNA_DB_HOST=from-file\n")
            f.write("NOVERNA_DB_NAME=filedb\n")
            path = f.name
        self.addCleanup(os.unlink, path)

        config = ConfigLoader.load(env_file=path)

        self.assertEqual(config.db_host, "from-env")
        self.assertEqual(config.db_name, "filedb")

    def test_missing_dotenv_file_is_skipped(self):
        config = ConfigLoader.load(env_file="/nonexistent/.env.local")
        self.assertEqual(config.db_host, "localhost")

    def test_settings_override_environment(self):
        """Test that host settings take precedence over environment variables."""
        os.environ["NOVERNA_DB_HOST"] = "from-env"
        os.environ["NOVERNA_DB_PORT"] = "6543"

        config = ConfigLoader.load(
            settings={"noverna_db_host": "from-settings", "noverna_db_max_connections": 8, "noverna_db_name": ""},
            env_file=None,
        )

        self.assertEqual(config.db_host, "from-settings")
        self.assertEqual(config.db_port, 6543)
        self.assertEqual(config.max_connections, 8)
        self.assertEqual(config.db_name, "noverna")

    def test_cli_overrides_everything(self):
        """Test that CLI arguments have the highest priority."""
        os.environ["NOVERNA_DB_HOST"] = "from-env"
        parser = ConfigLoader.generate_cli_parser()
        args = parser.parse_args(["--db-host", "from-cli", "--max-connections", "3", "--connection-timeout", "250"])

        config = ConfigLoader.load(
            settings={"noverna_db_host": "from-settings"},
            cli_args=args,
            env_file=None,
        )

        self.assertEqual(config.db_host, "from-cli")
        self.assertEqual(config.max_connections, 3)
        self.assertEqual(config.connection_timeout_ms, 250)

    def test_empty_cli_value_clears_to_default(self):
        os.environ["NOVERNA_DB_URL"] = "postgresql://u@h/db"
        args = ConfigLoader.generate_cli_parser().parse_args(["--db-url", ""])

        config = ConfigLoader.load(cli_args=args, env_file=None)

        self.assertIsNone(config.db_url)

    def test_invalid_port_names_env_var(self):
        """Test that validation errors name the environment variable."""
        os.environ["NOVERNA_DB_PORT"] = "0"

        with self.assertRaises(ConfigError) as cm:
            ConfigLoader.load(env_file=None)

        self.assertIn("NOVERNA_DB_PORT", str(cm.exception))

    def test_non_numeric_value(self):
        os.environ["NOVERNA_DB_MAX_CONNECTIONS"] = "many"

        with self.assertRaises(ConfigError) as cm:
            ConfigLoader.load(env_file=None)

        self.assertIn("NOVERNA_DB_MAX_CONNECTIONS", str(cm.exception))

    def test_multiple_errors_are_reported_together(self):
        os.environ["NOVERNA_DB_MAX_CONNECTIONS"] = "0"
        os.environ["NOVERNA_DB_IDLE_TIMEOUT"] = "10"

        with self.assertRaises(ConfigError) as cm:
            ConfigLoader.load(env_file=None)

        message = str(cm.exception)
        self.assertIn("NOVERNA_DB_MAX_CONNECTIONS", message)
        self.assertIn("NOVERNA_DB_IDLE_TIMEOUT", message)


class TestConfigSchema(unittest.TestCase):
    """Test cases for the schema itself."""

    def test_blank_url_is_none(self):
        self.assertIsNone(ConfigSchema(db_url="  ").db_url)

    def test_unknown_fields_rejected(self):
        with self.assertRaises(ValidationError):
            ConfigSchema(db_hostname="typo")

    def test_every_field_has_sources(self):
        """Test that each field can be set from every source."""
        for name, field_info in ConfigSchema.model_fields.items():
            extra = field_info.json_schema_extra
            self.assertTrue(extra.get("env_var", "").startswith("NOVERNA_DB_"), name)
            self.assertTrue(extra.get("setting", "").startswith("noverna_db_"), name)
            self.assertTrue(extra.get("cli_arg"), name)

    def test_database_config_from_schema(self):
        config = ConfigSchema(db_host="h", db_password="pw", max_connections=2)

        db_config = database_config_from_schema(config)

        self.assertIsInstance(db_config, DatabaseConfig)
        self.assertEqual(db_config.host, "h")
        self.assertEqual(db_config.password, "pw")
        self.assertEqual(db_config.max_connections, 2)
        self.assertIsNone(db_config.url)

    def test_database_config_from_schema_rejects_bad_url(self):
        config = ConfigSchema(db_url="mysql://u@h/db")

        self.assertIsNone(database_config_from_schema(config))


class TestCliParser(unittest.TestCase):
    """Test cases for the generated argument parser."""

    def setUp(self):
        self.parser = ConfigLoader.generate_cli_parser()

    def test_defaults(self):
        args = self.parser.parse_args(["SELECT 1"])

        self.assertEqual(args.sql, "SELECT 1")
        self.assertEqual(args.mode, "query")
        self.assertEqual(args.param, [])
        self.assertFalse(args.check)
        self.assertFalse(args.verbose)
        self.assertIsNone(args.db_host)
        self.assertIsNone(args.max_connections)

    def test_repeated_params(self):
        args = self.parser.parse_args(["SELECT :a, :b", "--param", "a=1", "--param", "b=x", "--mode", "single"])

        self.assertEqual(args.param, ["a=1", "b=x"])
        self.assertEqual(args.mode, "single")

    def test_schema_arguments_are_typed(self):
        args = self.parser.parse_args(["--check", "--db-port", "6543", "--idle-timeout", "45000"])

        self.assertTrue(args.check)
        self.assertEqual(args.db_port, 6543)
        self.assertEqual(args.idle_timeout, 45000)

    def test_invalid_mode_exits(self):
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                self.parser.parse_args(["SELECT 1", "--mode", "delete"])


if __name__ == "__main__":
    unittest.main()
