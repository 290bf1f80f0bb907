"""Library configuration using Pydantic settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from authbridge import __version__


class Settings(BaseSettings):
    """Settings sourced from environment variables and .env files."""

    http_timeout_seconds: float = Field(
        default=10.0,
        alias="OAUTH_HTTP_TIMEOUT_SECONDS",
        description="Timeout applied to clients opened by the default flow steps.",
    )
    user_agent: str = Field(
        default=f"authbridge/{__version__}",
        alias="OAUTH_USER_AGENT",
    )

    # WeChat Open Platform
    wechat_client_id: str = Field(
        default="",
        alias="WECHAT_CLIENT_ID",
    )
    wechat_client_secret: str = Field(
        default="",
        alias="WECHAT_CLIENT_SECRET",
    )
    wechat_redirect_uri: str = Field(
        default="",
        alias="WECHAT_REDIRECT_URI",
    )
    wechat_lang: Literal["cn", "en"] = Field(
        default="cn",
        alias="WECHAT_LANG",
    )

    # GitHub OAuth Configuration
    github_client_id: str = Field(
        default="",
        alias="GITHUB_CLIENT_ID",
    )
    github_client_secret: str = Field(
        default="",
        alias="GITHUB_CLIENT_SECRET",
    )

    # Discord OAuth Configuration
    discord_client_id: str = Field(
        default="",
        alias="DISCORD_CLIENT_ID",
    )
    discord_client_secret: str = Field(
        default="",
        alias="DISCORD_CLIENT_SECRET",
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()

__all__ = ["Settings", "settings"]
