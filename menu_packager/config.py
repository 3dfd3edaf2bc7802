"""
Runtime configuration for the AI collaborators and the pricing defaults.

Settings are read once from the environment (and a local .env file) by the
entry point and handed to the collaborators that need them. Core pricing code
never reads the environment.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from menu_packager.errors import ConfigurationError

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = {"your_api_key_here", "your_gemini_api_key_here", "your_openai_api_key_here"}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _mask(secret: Optional[str]) -> Optional[str]:
    if not secret:
        return None
    if len(secret) <= 6:
        return "*" * len(secret)
    return f"{secret[:3]}...{secret[-3:]}"


def _env_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    base_url: Optional[str] = None

    azure_endpoint: Optional[str] = None
    azure_deployment: Optional[str] = None
    azure_api_version: str = "2024-08-01-preview"

    temperature: float = 0.2
    max_tokens: int = 8192
    timeout: float = 60
    max_retries: int = 3

    default_currency: str = "£"
    decimal_prices: bool = False

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)

        return cls(
            api_key=os.getenv("MENU_AI_API_KEY") or os.getenv("OPENAI_API_KEY"),
            model=os.getenv("MENU_AI_MODEL", cls.model),
            base_url=os.getenv("MENU_AI_BASE_URL") or None,
            azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT") or None,
            azure_deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME") or None,
            azure_api_version=os.getenv("AZURE_OPENAI_API_VERSION", cls.azure_api_version),
            temperature=_env_number("MENU_AI_TEMPERATURE", float, cls.temperature),
            max_tokens=_env_number("MENU_AI_MAX_TOKENS", int, cls.max_tokens),
            timeout=_env_number("MENU_AI_TIMEOUT", float, cls.timeout),
            max_retries=_env_number("MENU_AI_MAX_RETRIES", int, cls.max_retries),
            default_currency=os.getenv("MENU_DEFAULT_CURRENCY", cls.default_currency),
            decimal_prices=os.getenv("MENU_DECIMAL_PRICES", "false").strip().lower() in _TRUE_VALUES,
        )

    @property
    def uses_azure(self) -> bool:
        return bool(self.azure_endpoint and self.azure_deployment)

    @property
    def model_name(self) -> str:
        # Azure addresses models by deployment name
        if self.uses_azure:
            return self.azure_deployment
        return self.model

    def require_api_key(self) -> str:
        if not self.api_key or self.api_key.strip() in PLACEHOLDER_KEYS:
            raise ConfigurationError(
                "Missing or invalid AI API key. Set MENU_AI_API_KEY (or OPENAI_API_KEY) in your .env file"
            )
        return self.api_key.strip()

    def describe(self) -> Dict[str, Any]:
        """Configuration status with secrets masked, safe to print."""
        return {
            "api_key": {
                "exists": bool(self.api_key),
                "length": len(self.api_key) if self.api_key else 0,
                "masked": _mask(self.api_key),
                "placeholder": bool(self.api_key) and self.api_key.strip() in PLACEHOLDER_KEYS,
            },
            "provider": "azure" if self.uses_azure else "openai",
            "model": self.model_name,
            "base_url": self.base_url,
            "azure_endpoint": self.azure_endpoint,
            "azure_api_version": self.azure_api_version if self.uses_azure else None,
            "default_currency": self.default_currency,
            "decimal_prices": self.decimal_prices,
        }
