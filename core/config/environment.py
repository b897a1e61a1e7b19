"""
Environment Configuration Module

Loads environment variables for feature generation. A ``.env`` file in
the working directory (or an explicit path) is read first; variables
already set in the process environment win.
"""
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


def load_environment(env_file: Optional[Union[str, Path]] = None) -> bool:
    """Load a .env file into the process environment.

    Args:
        env_file: Explicit .env path; defaults to ./.env

    Returns:
        True if a file was found and loaded
    """
    env_path = Path(env_file) if env_file else Path.cwd() / '.env'
    if not env_path.is_file():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


class EnvironmentConfig:
    """Typed access to the environment variables the tool reads."""

    @staticmethod
    def get_str(name: str, default: Optional[str] = None) -> Optional[str]:
        value = os.getenv(name)
        return value if value not in (None, "") else default

    @staticmethod
    def get_int(name: str, default: int) -> int:
        value = os.getenv(name)
        if value in (None, ""):
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {value!r}")

    @staticmethod
    def get_float(name: str, default: float) -> float:
        value = os.getenv(name)
        if value in (None, ""):
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {value!r}")

    @classmethod
    def get_llm_api_key(cls, provider_type: Optional[str] = None) -> Optional[str]:
        """Get the API key for the specified or configured LLM provider.

        Args:
            provider_type: Override provider type. If None, uses LLM_PROVIDER env var.
        """
        provider = (provider_type or cls.get_str("LLM_PROVIDER", "openai")).lower()
        if provider == "anthropic" or provider == "claude":
            return cls.get_str("ANTHROPIC_API_KEY")
        elif provider == "ollama":
            return None
        else:
            return cls.get_str("OPENAI_API_KEY")
