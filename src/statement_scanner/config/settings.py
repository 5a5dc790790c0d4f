import json
import os
from pathlib import Path
from typing import Dict, Any

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

CONFIG_DIR_ENV = "STATEMENT_SCANNER_CONFIG_DIR"


class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def user_config_dir() -> Path:
        """User config directory, overridable through the environment"""
        override = os.getenv(CONFIG_DIR_ENV)
        return Path(override) if override else USER_CONFIG_DIR

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'rules.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = ConfigLoader.user_config_dir() / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_file(filepath: Path | str) -> Dict[str, Any]:
        """Load an explicit JSON config file (e.g. passed on the command line)"""
        with open(filepath) as f:
            return json.load(f)

    @staticmethod
    def load_rules_config() -> Dict[str, Any]:
        """Load keyword rules configuration"""
        return ConfigLoader.load_config('rules.json')

    @staticmethod
    def load_categories_config() -> Dict[str, Any]:
        """Load the seed category list"""
        return ConfigLoader.load_config('categories.json')

    @staticmethod
    def load_gateways_config() -> Dict[str, Any]:
        """Load extraction gateway registry configuration"""
        return ConfigLoader.load_config('gateways.json')
