"""
Configuration loading and validation for deepresearch.

Loads research.toml files and validates settings using Pydantic.
"""

import logging
import os
from pathlib import Path
from typing import Literal

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("research.toml")

DEFAULT_API_KEY_ENVS = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "ark": "ARK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "firecrawl": "FIRECRAWL_API_KEY",
    "tavily": "TAVILY_API_KEY",
    "serper": "SERPER_API_KEY",
}


class ModelConfig(BaseModel):
    """Generation provider settings."""

    provider: Literal["openai", "deepseek", "ark", "openrouter", "anthropic"] = "openai"
    name: str = "gpt-4o"
    api_key_env: str | None = None  # Defaults per provider
    base_url: str | None = None
    timeout_seconds: int = Field(default=300, gt=0)
    max_retries: int = Field(default=3, ge=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)

    def resolved_api_key_env(self) -> str:
        return self.api_key_env or DEFAULT_API_KEY_ENVS[self.provider]


class SearchConfig(BaseModel):
    """Search provider settings."""

    provider: Literal["firecrawl", "tavily", "serper"] = "firecrawl"
    api_key_env: str | None = None
    base_url: str | None = None  # Self-hosted Firecrawl
    timeout_seconds: float = Field(default=15.0, gt=0)
    result_limit: int = Field(default=5, ge=1, le=20)
    formats: list[str] = Field(default_factory=lambda: ["markdown"])

    def resolved_api_key_env(self) -> str:
        return self.api_key_env or DEFAULT_API_KEY_ENVS[self.provider]


class ResearchSettings(BaseModel):
    """Breadth/depth budget and orchestration knobs."""

    breadth: int = Field(default=4, ge=1, le=10)
    depth: int = Field(default=2, ge=1, le=5)
    concurrency_limit: int = Field(default=2, ge=1)
    limiter_scope: Literal["global", "per_node"] = "global"
    max_learnings: int = Field(default=3, ge=1)
    feedback_questions: int = Field(default=3, ge=0)


class BudgetConfig(BaseModel):
    """Token budgets for model calls."""

    encoding: str = "o200k_base"
    document_tokens: int = Field(default=25_000, gt=0)
    report_tokens: int = Field(default=150_000, gt=0)
    min_chunk_chars: int = Field(default=140, gt=0)
    chars_per_token: int = Field(default=3, ge=1)


class OutputConfig(BaseModel):
    """Where results go."""

    report_path: Path = Path("report.md")
    log_file: Path | None = None


class ResearchConfig(BaseModel):
    """Complete configuration for a research run."""

    model: ModelConfig = Field(default_factory=ModelConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    research: ResearchSettings = Field(default_factory=ResearchSettings)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("search")
    @classmethod
    def validate_formats(cls, v: SearchConfig) -> SearchConfig:
        """Formats a provider can return as page content."""
        unknown = [f for f in v.formats if f not in ("markdown", "html", "rawHtml")]
        if unknown:
            raise ValueError(f"Unsupported search formats: {unknown}")
        return v

    def get_model_api_key(self) -> str:
        """
        Get the generation API key from the environment.

        Raises:
            ValueError: If the variable is unset or empty
        """
        env = self.model.resolved_api_key_env()
        api_key = os.environ.get(env)
        if not api_key:
            raise ValueError(
                f"API key not found in environment: {env} "
                f"(required for {self.model.provider}:{self.model.name})"
            )
        return api_key

    def get_search_api_key(self) -> str | None:
        """
        Get the search API key from the environment.

        Self-hosted Firecrawl (base_url set) may run without a key.

        Raises:
            ValueError: If the key is required and missing
        """
        env = self.search.resolved_api_key_env()
        api_key = os.environ.get(env)
        if api_key:
            return api_key
        if self.search.provider == "firecrawl" and self.search.base_url:
            return None
        raise ValueError(
            f"API key not found in environment: {env} "
            f"(required for {self.search.provider} search)"
        )


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ResearchConfig:
    """
    Load research configuration from a TOML file.

    A missing file yields the defaults.

    Raises:
        ValueError: If the file exists but is invalid
    """
    if not config_path.exists():
        logger.info(f"No config at {config_path}, using defaults")
        return ResearchConfig()

    with open(config_path, "rb") as f:
        config_data = tomllib.load(f)

    try:
        config = ResearchConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config


def create_default_config(output_path: Path) -> None:
    """Write a research.toml template with the default settings."""
    template = '''[model]
provider = "openai"  # openai | deepseek | ark | openrouter | anthropic
name = "gpt-4o"
# api_key_env = "OPENAI_API_KEY"
# base_url = "https://api.openai.com/v1"
timeout_seconds = 300
max_retries = 3

[search]
provider = "firecrawl"  # firecrawl | tavily | serper
# api_key_env = "FIRECRAWL_API_KEY"
# base_url = "http://localhost:3002"  # self-hosted Firecrawl
timeout_seconds = 15
result_limit = 5
formats = ["markdown"]

[research]
breadth = 4
depth = 2
concurrency_limit = 2  # raise this if your API rate limits allow it
limiter_scope = "global"  # global | per_node
max_learnings = 3
feedback_questions = 3

[budget]
encoding = "o200k_base"
document_tokens = 25000
report_tokens = 150000
min_chunk_chars = 140
chars_per_token = 3

[output]
report_path = "report.md"
# log_file = "research.log"
'''
    output_path.write_text(template, encoding="utf-8")
