"""
Configuration management - externalized and extensible.

Values come from environment variables (optionally via .env) and can be
overridden by a YAML file passed to AppConfig.load().
"""
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .environment import EnvironmentConfig, load_environment

env = EnvironmentConfig


@dataclass
class LLMSettings:
    """Generative service configuration.

    A model of None lets the provider factory pick the default for the provider.
    """
    provider: str = "openai"
    model: Optional[str] = None
    endpoint: str = "http://localhost:11434"
    timeout: int = 60
    max_retries: int = 0
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'LLMSettings':
        """Create config from environment variables."""
        provider = env.get_str("LLM_PROVIDER", "openai")
        return cls(
            provider=provider,
            model=env.get_str("LLM_MODEL"),
            endpoint=env.get_str("LLM_ENDPOINT", "http://localhost:11434"),
            timeout=env.get_int("LLM_TIMEOUT", 60),
            max_retries=env.get_int("LLM_MAX_RETRIES", 0),
            api_key=env.get_llm_api_key(provider)
        )


@dataclass
class GenerationConfig:
    """Sampling parameters and scenario bounds."""
    feature_temperature: float = 0.3
    feature_max_tokens: int = 1500
    step_temperature: float = 0.2
    step_max_tokens: int = 2000
    min_scenarios: int = 2
    max_scenarios: int = 6
    max_inventory_steps: int = 200

    @classmethod
    def from_env(cls) -> 'GenerationConfig':
        """Create config from environment variables."""
        return cls(
            feature_temperature=env.get_float("FEATURE_TEMPERATURE", 0.3),
            feature_max_tokens=env.get_int("FEATURE_MAX_TOKENS", 1500),
            step_temperature=env.get_float("STEP_TEMPERATURE", 0.2),
            step_max_tokens=env.get_int("STEP_MAX_TOKENS", 2000),
            min_scenarios=env.get_int("MIN_SCENARIOS", 2),
            max_scenarios=env.get_int("MAX_SCENARIOS", 6),
            max_inventory_steps=env.get_int("MAX_INVENTORY_STEPS", 200)
        )


@dataclass
class PathsConfig:
    """Locations of the test suite's features, steps and knowledge base."""
    features_dir: str = "src/features"
    steps_dir: str = "src/steps"
    knowledge_base_path: str = "src/support/ai/knowledgeBase.json"
    step_file_glob: str = "**/*.steps.ts"

    @classmethod
    def from_env(cls) -> 'PathsConfig':
        """Create config from environment variables."""
        return cls(
            features_dir=env.get_str("FEATURES_DIR", "src/features"),
            steps_dir=env.get_str("STEPS_DIR", "src/steps"),
            knowledge_base_path=env.get_str("KNOWLEDGE_BASE_PATH", "src/support/ai/knowledgeBase.json"),
            step_file_glob=env.get_str("STEP_FILE_GLOB", "**/*.steps.ts")
        )


@dataclass
class LoggingConfig:
    """Log level and output format ('text' or 'json')."""
    level: str = "INFO"
    format: str = "text"

    @classmethod
    def from_env(cls) -> 'LoggingConfig':
        """Create config from environment variables."""
        return cls(
            level=env.get_str("LOG_LEVEL", "INFO"),
            format=env.get_str("LOG_FORMAT", "text")
        )


def _overlay(section: Any, values: Optional[Dict[str, Any]], name: str) -> Any:
    """Return ``section`` with the keys of a YAML mapping applied."""
    if not values:
        return section
    if not isinstance(values, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(section)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
    return replace(section, **values)


@dataclass
class AppConfig:
    """Application-wide configuration."""
    llm: LLMSettings
    generation: GenerationConfig
    paths: PathsConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Build configuration from environment variables only."""
        return cls(
            llm=LLMSettings.from_env(),
            generation=GenerationConfig.from_env(),
            paths=PathsConfig.from_env(),
            logging=LoggingConfig.from_env()
        )

    @classmethod
    def load(cls, config_file: Optional[Union[str, Path]] = None) -> 'AppConfig':
        """Load application configuration.

        Args:
            config_file: Optional YAML file with ``llm``, ``generation``,
                ``paths`` and ``logging`` sections overriding the environment

        Raises:
            FileNotFoundError: If config_file does not exist
            ValueError: If the YAML document is not a mapping or has unknown keys
        """
        load_environment()
        config = cls.from_env()
        if config_file is None:
            return config

        path = Path(config_file)
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        unknown = sorted(set(data) - {"llm", "generation", "paths", "logging"})
        if unknown:
            raise ValueError(f"Unknown config sections in {path}: {', '.join(unknown)}")

        llm = _overlay(config.llm, data.get("llm"), "llm")
        if "provider" in (data.get("llm") or {}) and "api_key" not in data["llm"]:
            llm = replace(llm, api_key=env.get_llm_api_key(llm.provider))

        return cls(
            llm=llm,
            generation=_overlay(config.generation, data.get("generation"), "generation"),
            paths=_overlay(config.paths, data.get("paths"), "paths"),
            logging=_overlay(config.logging, data.get("logging"), "logging")
        )


__all__ = [
    'AppConfig',
    'EnvironmentConfig',
    'GenerationConfig',
    'LLMSettings',
    'LoggingConfig',
    'PathsConfig',
    'load_environment',
]
