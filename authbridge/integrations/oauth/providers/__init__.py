"""Built-in provider definitions."""

from .discord import discord
from .github import github
from .wechat import wechat

__all__ = ["discord", "github", "wechat"]
