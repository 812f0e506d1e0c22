"""Configuration settings for the MCP forwarded-address server."""

import logging
import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.ip_utils import DEFAULT_PRIVATE_IPV4_PREFIXES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Record fields
    source_field: str = Field(default="message", min_length=1)
    target_client_ip: str = Field(default="forwarded_client_ip", min_length=1)
    target_proxy_list: str = Field(default="forwarded_proxy_list", min_length=1)

    # Private ranges, as a JSON array in the environment
    private_ipv4_prefixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PRIVATE_IPV4_PREFIXES)
    )

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def __init__(self, _env_file: str | None = None, **data: object) -> None:
        if _env_file is None:
            running_tests = 'pytest' in sys.modules or os.environ.get('PYTEST_CURRENT_TEST') is not None
            if not running_tests:
                # Try to find .env file in current directory or parent directories
                import pathlib
                current_dir = pathlib.Path.cwd()
                for path in [current_dir] + list(current_dir.parents):
                    env_file = path / '.env'
                    if env_file.exists():
                        _env_file = str(env_file)
                        print(f"[MCP Forwarded] Loading environment from: {_env_file}", file=sys.stderr)
                        break

        super().__init__(_env_file=_env_file, **data)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

