"""Shared fixtures for the pricing registry tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

from model_pricing_registry.registry import PricingRegistry


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep tests away from real user data, env settings and the default registry."""
    for var in ("MPR_PRICING_PATH", "MPR_OVERRIDES_PATH", "MPR_DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("MPR_DATA_DIR", str(tmp_path / "user-data"))
    monkeypatch.chdir(tmp_path)

    original_instance = PricingRegistry._default_instance
    PricingRegistry._default_instance = None
    yield
    PricingRegistry._default_instance = original_instance


@pytest.fixture
def pricing_source() -> Dict[str, Any]:
    """A small raw pricing source in the LiteLLM format."""
    return {
        "claude-sonnet-4-20250514": {
            "input_cost_per_token": 3e-6,
            "output_cost_per_token": 1.5e-5,
            "cache_creation_input_token_cost": 3.75e-6,
            "cache_read_input_token_cost": 3e-7,
            "input_cost_per_token_above_200k_tokens": 6e-6,
            "output_cost_per_token_above_200k_tokens": 2.25e-5,
            "cache_creation_input_token_cost_above_200k_tokens": 7.5e-6,
            "cache_read_input_token_cost_above_200k_tokens": 6e-7,
            "max_input_tokens": 1_000_000,
            "max_output_tokens": 64000,
            "litellm_provider": "anthropic",
        },
        "gpt-5": {
            "input_cost_per_token": 1.25e-6,
            "output_cost_per_token": 1e-5,
            "cache_read_input_token_cost": 1.25e-7,
            "max_input_tokens": 272000,
            "mode": "chat",
        },
        "glm-4.5": {"input_cost_per_token": 1e-6, "output_cost_per_token": 2e-6},
        "zai/glm-4.5": {"input_cost_per_token": 6e-7, "output_cost_per_token": 2.2e-6},
        "free-model": {"input_cost_per_token": 0, "output_cost_per_token": 0},
    }


@pytest.fixture
def kat_coder_entry() -> Dict[str, Any]:
    """A range-tiered pricing entry with three input-length tiers."""
    return {
        "input_cost_per_token": 6e-7,
        "output_cost_per_token": 2.4e-6,
        "cache_read_input_token_cost": 1.2e-7,
        "tiered_pricing": [
            {
                "input_cost_per_token": 6e-7,
                "output_cost_per_token": 2.4e-6,
                "range": [0, 32000],
                "cache_read_input_token_cost": 1.2e-7,
            },
            {
                "input_cost_per_token": 9e-7,
                "output_cost_per_token": 3.6e-6,
                "range": [32000, 128000],
                "cache_read_input_token_cost": 1.8e-7,
            },
            {
                "input_cost_per_token": 1.5e-6,
                "output_cost_per_token": 6e-6,
                "range": [128000, 256000],
                "cache_read_input_token_cost": 3e-7,
            },
        ],
    }


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a JSON document below tmp_path and return its path."""

    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write
