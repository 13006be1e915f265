"""
Configuration management for the Crediario identity core

Loads an optional JSON config file and applies environment overrides on top
of sensible defaults.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional, List


DEFAULT_PASSWORD_RESET_BODY = (
    "New password\n\n"
    "To sign in you must use the following temporary password: {password} . "
    "Remember to change your password."
)


def _env_flag(name: str) -> Optional[bool]:
    """Read a 0/1 style environment flag, None when unset."""
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DatabaseConfig:
    """Database configuration."""

    url: str = "sqlite:///crediario.db"
    echo: bool = False
    pool_pre_ping: bool = True
    log_queries: bool = False  # Enable query logging for performance analysis


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    auto_reload: bool = False
    workers: int = 1


@dataclass
class AppConfig:
    """Main application configuration."""

    app_name: str = "Crediario Identity"
    version: str = "1.0.0"
    description: str = "Registration, authentication and password recovery"

    # Credentials
    password_hash_iterations: int = 120_000  # PBKDF2 iterations
    temporary_password_length: int = 7

    # Password reset email
    email_from: str = "no-reply@crediario.local"
    password_reset_subject: str = "New password"
    password_reset_body_template: str = DEFAULT_PASSWORD_RESET_BODY

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"


@dataclass
class CrediarioConfig:
    """Complete configuration for the Crediario identity core."""

    app: AppConfig
    server: ServerConfig
    database: DatabaseConfig

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "app": asdict(self.app),
            "server": asdict(self.server),
            "database": asdict(self.database),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrediarioConfig":
        """Create from dictionary."""
        return cls(
            app=AppConfig(**data.get("app", {})),
            server=ServerConfig(**data.get("server", {})),
            database=DatabaseConfig(**data.get("database", {})),
        )


class ConfigManager:
    """Manages configuration loading, saving, and environment overrides."""

    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[CrediarioConfig] = None

    def get_config_file_path(self) -> Path:
        """Get the path for the config file."""
        explicit = os.getenv("CREDIARIO_CONFIG_FILE")
        if explicit:
            return Path(explicit)
        return Path.cwd() / "data" / "config.json"

    def apply_environment(self, config: CrediarioConfig) -> CrediarioConfig:
        """Apply CREDIARIO_* environment overrides to a configuration."""
        db_url = os.getenv("CREDIARIO_DATABASE_URL")
        if db_url:
            config.database.url = db_url

        debug = _env_flag("CREDIARIO_DEBUG")
        if debug is not None:
            config.server.debug = debug
            config.app.log_level = "DEBUG" if debug else config.app.log_level

        log_to_file = _env_flag("CREDIARIO_LOG_TO_FILE")
        if log_to_file is not None:
            config.app.log_to_file = log_to_file

        log_dir = os.getenv("CREDIARIO_LOG_DIR")
        if log_dir:
            config.app.log_dir = log_dir

        return config

    def create_default_config(self) -> CrediarioConfig:
        """Create default configuration with environment overrides applied."""
        config = CrediarioConfig(
            app=AppConfig(),
            server=ServerConfig(),
            database=DatabaseConfig(),
        )
        return self.apply_environment(config)

    def load_config(self) -> CrediarioConfig:
        """Load configuration from file or create default."""
        if self.config is not None:
            return self.config

        self.config_file = self.get_config_file_path()

        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self.config = self.apply_environment(CrediarioConfig.from_dict(data))
                logging.info(f"Loaded configuration from {self.config_file}")
            except (OSError, ValueError, TypeError) as e:
                logging.warning(f"Failed to load config from {self.config_file}: {e}")
                logging.info("Creating default configuration")
                self.config = self.create_default_config()
        else:
            self.config = self.create_default_config()

        return self.config

    def save_config(self, config: Optional[CrediarioConfig] = None) -> bool:
        """Save configuration to file."""
        if config is None:
            config = self.config

        if config is None:
            logging.error("No configuration to save")
            return False

        try:
            if self.config_file is None:
                self.config_file = self.get_config_file_path()

            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)

            logging.info(f"Saved configuration to {self.config_file}")
            return True

        except OSError as e:
            logging.error(f"Failed to save config to {self.config_file}: {e}")
            return False

    def reset(self) -> None:
        """Forget the loaded configuration so the next access reloads it."""
        self.config = None
        self.config_file = None

    def get_database_url(self) -> str:
        """Get the database URL."""
        return self.load_config().database.url

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        config = self.load_config()
        issues = []

        if config.app.password_hash_iterations < 10_000:
            issues.append(
                f"password_hash_iterations is too low: {config.app.password_hash_iterations}"
            )

        if config.app.temporary_password_length < 6:
            issues.append(
                f"temporary_password_length is too short: {config.app.temporary_password_length}"
            )

        if "{password}" not in config.app.password_reset_body_template:
            issues.append("password_reset_body_template has no {password} placeholder")

        if "@" not in config.app.email_from:
            issues.append(f"email_from is not an email address: {config.app.email_from}")

        db_url = config.database.url
        if db_url.startswith("sqlite:///") and db_url != "sqlite:///:memory:":
            db_dir = Path(db_url.replace("sqlite:///", "")).parent
            if db_dir.exists() and not os.access(db_dir, os.W_OK):
                issues.append(f"Database directory is not writable: {db_dir}")

        return issues


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> CrediarioConfig:
    """Get the current configuration."""
    return config_manager.load_config()


def get_database_url() -> str:
    """Get the database URL."""
    return config_manager.get_database_url()


def reset_config() -> None:
    """Drop the cached configuration (used by tests after env changes)."""
    config_manager.reset()
