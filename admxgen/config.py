"""
Configuration management for admxgen.

This module uses Pydantic's BaseSettings to manage configuration
through environment variables. It provides a centralized and typed
way to handle the toolchain, cache and network settings.
"""
import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_dir() -> Path:
    """Per-user application data directory used for the reference package cache."""
    base = os.getenv("LOCALAPPDATA") or os.getenv("XDG_DATA_HOME")
    if not base:
        base = str(Path.home() / ".local" / "share")
    return Path(base) / "AdmxGen"


class Settings(BaseSettings):
    """
    Application settings.

    These settings are loaded from environment variables prefixed with
    ``ADMXGEN_`` (or a local ``.env`` file).
    """

    # Reference package cache
    CACHE_DIR: Path = _default_cache_dir()
    REF_PACKAGE_URL: str = "https://www.nuget.org/api/v2/package/Microsoft.NETCore.App.Ref/{version}"

    # Runtime identity overrides (detected through `dotnet --list-runtimes` otherwise)
    RUNTIME_VERSION: str | None = None
    FRAMEWORK_DESCRIPTION: str | None = None

    # Toolchain
    DOTNET_PATH: str | None = None
    CSC_PATH: str | None = None
    COMPILE_TIMEOUT_S: float = 600.0

    # Network
    HTTP_TIMEOUT_S: float = 60.0
    # Extra download attempts on transport errors; 0 leaves retrying to the caller.
    DOWNLOAD_RETRIES: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        env_prefix="ADMXGEN_",
        extra="ignore",
    )


settings = Settings()
