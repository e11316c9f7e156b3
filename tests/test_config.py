"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from lumo_chat.config import DEFAULT_CONFIG, load_config


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config = load_config(config_path=config_path)
            self.assertEqual(config["app"]["title"], "LumoAI")
            self.assertEqual(config["app"]["class"], "lumochat")
            self.assertEqual(config["server"]["host"], "http://localhost:5000")
            self.assertEqual(config["server"]["api_prefix"], "/api")
            self.assertEqual(config["chat"]["default_mode"], "default")
            self.assertEqual(config["chat"]["title_max_length"], 50)
            self.assertEqual(config["theme"]["name"], "dark")
            self.assertEqual(
                config["keybinds"]["send_message"],
                DEFAULT_CONFIG["keybinds"]["send_message"],
            )
            self.assertFalse(config["security"]["allow_remote_hosts"])
            self.assertEqual(config["logging"]["level"], "INFO")

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[server]
host = "http://127.0.0.1:8080/"
api_prefix = "v2/"

[chat]
default_mode = "STUDY"

[ui]
show_timestamps = false

[theme]
name = "Light"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["server"]["host"], "http://127.0.0.1:8080")
            self.assertEqual(config["server"]["api_prefix"], "/v2")
            self.assertEqual(config["chat"]["default_mode"], "study")
            self.assertFalse(config["ui"]["show_timestamps"])
            self.assertEqual(config["theme"]["name"], "light")
            self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])

    def test_unknown_default_mode_normalizes_to_default(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text('[chat]\ndefault_mode = "poetry"\n', encoding="utf-8")
            config = load_config(config_path=config_path)
            self.assertEqual(config["chat"]["default_mode"], "default")

    def test_invalid_values_fallback_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[server]
timeout = -1

[theme]
name = "solarized"

[keybinds]
send_message = ""
                """.strip(),
                encoding="utf-8",
            )
            with self.assertLogs("lumo_chat.config", level="WARNING"):
                config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_unparsable_toml_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[server\nhost = ", encoding="utf-8")
            config = load_config(config_path=config_path)
            self.assertEqual(config, DEFAULT_CONFIG)

    def test_remote_host_disallowed_by_default_policy(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                '[server]\nhost = "http://example.com:5000"\n', encoding="utf-8"
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["server"]["host"], DEFAULT_CONFIG["server"]["host"])
            self.assertFalse(config["security"]["allow_remote_hosts"])

    def test_remote_host_allowed_when_policy_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[server]
host = "https://lumo.example.com"

[security]
allow_remote_hosts = true
allowed_hosts = ["localhost"]
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
            self.assertEqual(config["server"]["host"], "https://lumo.example.com")
            self.assertTrue(config["security"]["allow_remote_hosts"])

    def test_overrides_are_merged_last(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                '[server]\nhost = "http://localhost:5000"\ntimeout = 30\n',
                encoding="utf-8",
            )
            config = load_config(
                config_path=config_path,
                overrides={"server": {"host": "http://127.0.0.1:9000"}},
            )
            self.assertEqual(config["server"]["host"], "http://127.0.0.1:9000")
            self.assertEqual(config["server"]["timeout"], 30)

    def test_non_http_scheme_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(
                config_path=Path(temp_dir) / "config.toml",
                overrides={"server": {"host": "ftp://localhost"}},
            )
        self.assertEqual(config["server"]["host"], DEFAULT_CONFIG["server"]["host"])


if __name__ == "__main__":
    unittest.main()
