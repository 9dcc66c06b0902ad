"""Shared settings and configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Workspace
    workspace_root: str = "./Workspace"
    max_file_size: int = 10 * 1024 * 1024  # 10 MiB, hard cap for file reads
    folder_name_max_length: int = 50
    tree_max_depth: int = 32  # 防止符号链接环等病态目录结构导致无限递归

    # HTTP server
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False
    cors_origins: list[str] = ["*"]

    # Other Configuration
    environment: str = "development"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
