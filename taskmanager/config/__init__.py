"""Typed configuration providers."""

from .provider import AuthConfig, ConfigProvider, EnvConfigProvider, TokenConfig

__all__ = ["AuthConfig", "ConfigProvider", "EnvConfigProvider", "TokenConfig"]
