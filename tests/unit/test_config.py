"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest

from deepresearch.config import (
    ResearchConfig,
    create_default_config,
    load_config,
)


def test_defaults():
    config = ResearchConfig()

    assert config.model.provider == "openai"
    assert config.search.provider == "firecrawl"
    assert config.search.timeout_seconds == 15.0
    assert config.search.result_limit == 5
    assert config.research.breadth == 4
    assert config.research.depth == 2
    assert config.research.concurrency_limit == 2
    assert config.research.limiter_scope == "global"
    assert config.budget.document_tokens == 25_000
    assert config.budget.report_tokens == 150_000


def test_missing_file_uses_defaults(tmp_path: Path):
    config = load_config(tmp_path / "missing.toml")

    assert config == ResearchConfig()


def test_default_template_round_trips(tmp_path: Path):
    path = tmp_path / "research.toml"
    create_default_config(path)

    config = load_config(path)

    assert config == ResearchConfig()


def test_load_overrides(tmp_path: Path):
    path = tmp_path / "research.toml"
    path.write_text(
        '[model]\nprovider = "anthropic"\nname = "claude-sonnet-4-20250514"\n\n'
        '[search]\nprovider = "tavily"\nresult_limit = 8\n\n'
        '[research]\nbreadth = 6\ndepth = 3\nlimiter_scope = "per_node"\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.model.provider == "anthropic"
    assert config.search.provider == "tavily"
    assert config.search.result_limit == 8
    assert config.research.breadth == 6
    assert config.research.depth == 3
    assert config.research.limiter_scope == "per_node"


@pytest.mark.parametrize("body", [
    '[research]\nbreadth = 0\n',
    '[research]\ndepth = 9\n',
    '[research]\nlimiter_scope = "everywhere"\n',
    '[search]\nprovider = "bing"\n',
    '[search]\nformats = ["screenshot"]\n',
])
def test_invalid_values_rejected(tmp_path: Path, body):
    path = tmp_path / "research.toml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_api_key_from_env(monkeypatch):
    monkeypatch.setenv("MY_KEY", "secret")
    config = ResearchConfig(model={"provider": "openai", "api_key_env": "MY_KEY"})

    assert config.get_model_api_key() == "secret"


def test_missing_model_key(monkeypatch):
    monkeypatch.delenv("ARK_API_KEY", raising=False)
    config = ResearchConfig(model={"provider": "ark", "name": "doubao-pro"})

    with pytest.raises(ValueError, match="ARK_API_KEY"):
        config.get_model_api_key()


def test_self_hosted_firecrawl_needs_no_key(monkeypatch):
    monkeypatch.delenv("FIRECRAWL_API_KEY", raising=False)

    hosted = ResearchConfig()
    self_hosted = ResearchConfig(search={"base_url": "http://localhost:3002"})

    with pytest.raises(ValueError):
        hosted.get_search_api_key()
    assert self_hosted.get_search_api_key() is None
