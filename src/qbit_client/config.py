"""Configuration management using pydantic-settings"""

import logging
from pathlib import Path

import toml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment and config.toml"""

    model_config = SettingsConfigDict(
        env_prefix='QBIT_',
        case_sensitive=False,
        extra='ignore',
    )

    # qBittorrent Web UI settings
    base_url: str = Field(default='http://localhost:8080', description='qBittorrent Web UI base URL')
    username: str = Field(default='admin', description='qBittorrent Web UI username')
    password: str = Field(default='adminadmin', description='qBittorrent Web UI password', repr=False)
    session_cookie: str | None = Field(
        default=None, description='Existing session cookie, used instead of username/password', repr=False
    )
    session_cookie_name: str = Field(default='SID', description='Name of the session cookie set on login')

    # HTTP settings
    timeout: float = Field(default=30.0, description='Request timeout in seconds')

    # Logging settings
    log_prefix: str = Field(default='qbit', description='Log prefix for logger names')
    log_level: int = Field(default=logging.INFO, description='Logging level')

    @field_validator('base_url', mode='before')
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        """Drop surrounding whitespace, the client validates the URL itself"""
        return str(v).strip()

    @field_validator('log_level', mode='before')
    @classmethod
    def parse_log_level(cls, v: str | int) -> int:
        """Parse log level from string or int"""
        if isinstance(v, str):
            if v.isdigit():
                return int(v)
            return getattr(logging, v.upper(), logging.INFO)
        return v

    @classmethod
    def from_toml(cls, config_path: str | Path = 'config.toml') -> 'Settings':
        """Load settings from TOML file, environment variables fill the gaps"""
        config_path = Path(config_path)
        if config_path.exists():
            config_data = toml.load(config_path)
            return cls(**config_data)
        # If no config file, try to load from environment
        return cls()


# Global settings instance
settings = Settings.from_toml()
