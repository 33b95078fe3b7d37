"""
Centralized configuration management for the morm record synchronizer.
All configuration settings are managed here.
"""

import os
from typing import Optional
from dotenv import load_dotenv
from dataclasses import dataclass

load_dotenv()


class ConfigurationError(ValueError):
    """Raised when a model binding or its settings are missing or invalid"""


@dataclass
class RDBMSConfig:
    """RDBMS database configuration"""
    connection_string: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10

    @classmethod
    def from_env(cls) -> 'RDBMSConfig':
        """Load RDBMS config from environment variables"""
        return cls(
            connection_string=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///:memory:"
            ),
            echo=os.getenv("DB_ECHO", "False").lower() == "true",
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10"))
        )


@dataclass
class ModelConfig:
    """Table binding used when a model is built from configuration"""
    table: Optional[str] = None
    identity: str = "id"
    bulk: bool = False
    sql_dialect: str = "sqlite"

    @classmethod
    def from_env(cls) -> 'ModelConfig':
        """Load model binding from environment variables"""
        return cls(
            table=os.getenv("MORM_TABLE"),
            identity=os.getenv("MORM_IDENTITY", "id"),
            bulk=os.getenv("MORM_BULK", "False").lower() == "true",
            sql_dialect=os.getenv("MORM_SQL_DIALECT", "sqlite")
        )

    def validate(self) -> bool:
        """Raise ConfigurationError when the table or identity is missing"""
        if not self.table:
            raise ConfigurationError("You must initialise a model with the table option")
        if not self.identity:
            raise ConfigurationError("You must initialise a model with the identity option")
        return True


@dataclass
class SystemConfig:
    """Overall system configuration"""
    records_path: str = "records.json"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'SystemConfig':
        """Load system config from environment variables"""
        return cls(
            records_path=os.getenv("RECORDS_PATH", "records.json"),
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )


class Config:
    """Main configuration class that aggregates all configs"""

    def __init__(self):
        self.rdbms = RDBMSConfig.from_env()
        self.model = ModelConfig.from_env()
        self.system = SystemConfig.from_env()

    @classmethod
    def load(cls) -> 'Config':
        """Load configuration from environment"""
        return cls()

    def validate(self) -> bool:
        """Validate that all required configurations are present"""
        errors = []

        if not self.rdbms.connection_string:
            errors.append("DATABASE_URL is required")
        if not self.model.table:
            errors.append("MORM_TABLE is required")
        if not self.model.identity:
            errors.append("MORM_IDENTITY is required")

        if errors:
            raise ConfigurationError(f"Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return True


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance"""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment"""
    global _config
    _config = Config.load()
    return _config
