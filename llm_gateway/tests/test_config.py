"""Configuration loading: catalog, config file, environment and .env merging."""
from __future__ import annotations

import json

import pytest

from llm_gateway.base.errors import RegistryConfigError
from llm_gateway.base.registry import ProviderRegistry
from llm_gateway.base.timeouts import TimeoutConfig
from llm_gateway.config import load_config_file, load_environment, load_gateway_config

DEFAULT_IDS = ["openai", "anthropic", "google", "groq", "openrouter"]


def _ids(cfg):
    return [d.id for d in cfg.descriptors]


def test_default_catalog_excludes_opt_in_backends():
    cfg = load_gateway_config(environ={})
    assert _ids(cfg) == DEFAULT_IDS
    assert cfg.timeouts == TimeoutConfig()
    # the default catalog is internally consistent
    ProviderRegistry(cfg.descriptors)


def test_google_descriptor_carries_alias():
    google = load_gateway_config(environ={}).descriptor("google")
    assert google.credential_key == "GOOGLE_GENERATIVE_AI_API_KEY"
    assert google.credential_aliases == ("GOOGLE_API_KEY",)


def test_use_mocks_adds_mock_provider():
    cfg = load_gateway_config(environ={"GATEWAY_USE_MOCKS": "1"})
    assert _ids(cfg)[-1] == "mock"
    assert cfg.descriptor("mock").credential_key is None


def test_ai_provider_restricts_and_orders():
    cfg = load_gateway_config(environ={"AI_PROVIDER": "groq, mock,unknown, groq"})
    assert _ids(cfg) == ["groq", "mock"]
    assert [d.priority for d in cfg.descriptors] == [0, 1]


def test_model_env_sets_default_and_extends_supported_set():
    cfg = load_gateway_config(environ={"OPENAI_MODEL": "gpt-4.1"})
    openai = cfg.descriptor("openai")
    assert openai.default_model_id == "gpt-4.1"
    assert openai.supports("gpt-4.1") and openai.supports("gpt-4o")


def test_base_url_env_enables_ollama():
    cfg = load_gateway_config(environ={"OLLAMA_BASE_URL": "http://gpu-box:11434/v1"})
    ollama = cfg.descriptor("ollama")
    assert ollama is not None
    assert ollama.base_url == "http://gpu-box:11434/v1"


def test_custom_provider_enabled_by_base_url_and_model():
    cfg = load_gateway_config(
        environ={"CUSTOM_BASE_URL": "https://llm.internal/v1", "CUSTOM_MODEL": "my-model"}
    )
    assert _ids(cfg) == DEFAULT_IDS + ["custom"]
    custom = cfg.descriptor("custom")
    assert custom.base_url == "https://llm.internal/v1"
    assert custom.default_model_id == "my-model"
    assert custom.supported_model_ids == frozenset({"my-model"})
    assert custom.credential_key == "CUSTOM_API_KEY"
    ProviderRegistry(cfg.descriptors)


def test_custom_provider_without_model_is_a_config_error():
    with pytest.raises(RegistryConfigError, match="CUSTOM_MODEL"):
        load_gateway_config(environ={"CUSTOM_BASE_URL": "https://llm.internal/v1"})


def test_custom_provider_without_base_url_is_a_config_error():
    with pytest.raises(RegistryConfigError, match="CUSTOM_BASE_URL"):
        load_gateway_config(environ={"CUSTOM_MODEL": "my-model"})


def test_timeouts_from_env():
    cfg = load_gateway_config(
        environ={"GATEWAY_TIMEOUT_START_SECONDS": "5", "GATEWAY_TIMEOUT_STREAM_SECONDS": "bogus"}
    )
    assert cfg.timeouts.start_timeout_seconds == 5.0
    assert cfg.timeouts.stream_timeout_seconds == TimeoutConfig().stream_timeout_seconds


def test_yaml_config_file_then_env_override(tmp_path):
    path = tmp_path / "gateway.yaml"
    path.write_text(
        "openai:\n"
        "  model: gpt-4o\n"
        "  models: [gpt-4o, o1]\n"
        "  priority: 9\n"
        "ollama:\n"
        "  enabled: true\n"
        "timeouts:\n"
        "  start_seconds: 3\n"
        "  stream_seconds: 4\n",
        encoding="utf-8",
    )
    cfg = load_gateway_config(
        environ={"GATEWAY_CONFIG_FILE": str(path), "GATEWAY_TIMEOUT_STREAM_SECONDS": "8"}
    )
    openai = cfg.descriptor("openai")
    assert openai.supported_model_ids == frozenset({"gpt-4o", "o1"})
    assert openai.priority == 9
    assert cfg.descriptor("ollama") is not None
    assert cfg.timeouts == TimeoutConfig(start_timeout_seconds=3.0, stream_timeout_seconds=8.0)


def test_json_config_file_can_disable_provider(tmp_path):
    path = tmp_path / "gateway.json"
    path.write_text(json.dumps({"groq": {"enabled": False}}), encoding="utf-8")
    cfg = load_gateway_config(environ={}, config_file=str(path))
    assert "groq" not in _ids(cfg)


def test_missing_config_file_is_ignored(tmp_path):
    assert load_config_file(str(tmp_path / "absent.yaml")) == {}
    assert load_config_file(None) == {}


def test_unparseable_config_file_raises(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("openai: [unclosed", encoding="utf-8")
    with pytest.raises(RegistryConfigError):
        load_config_file(str(path))


def test_config_file_must_be_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- openai\n- groq\n", encoding="utf-8")
    with pytest.raises(RegistryConfigError):
        load_config_file(str(path))


def test_inconsistent_catalog_fails_in_registry(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("openai:\n  model: not-listed\n  models: [gpt-4o]\n", encoding="utf-8")
    cfg = load_gateway_config(environ={}, config_file=str(path))
    with pytest.raises(RegistryConfigError):
        ProviderRegistry(cfg.descriptors)


def test_dotenv_fills_missing_and_placeholder_values(tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "OPENAI_API_KEY=sk-from-dotenv\n"
        "GROQ_API_KEY=gsk-from-dotenv\n"
        "ANTHROPIC_API_KEY=from-dotenv\n",
        encoding="utf-8",
    )
    env = load_environment(
        {
            "DOTENV_FILE": str(dotenv),
            "GROQ_API_KEY": "your_placeholder_key",
            "ANTHROPIC_API_KEY": "real-process-value",
        }
    )
    assert env["OPENAI_API_KEY"] == "sk-from-dotenv"
    assert env["GROQ_API_KEY"] == "gsk-from-dotenv"
    assert env["ANTHROPIC_API_KEY"] == "real-process-value"


def test_explicit_environ_without_dotenv_file_is_used_as_is():
    assert load_environment({"A": "1"}) == {"A": "1"}


def test_environ_snapshot_is_read_only():
    cfg = load_gateway_config(environ={"OPENAI_API_KEY": "sk-x"})
    assert cfg.environ["OPENAI_API_KEY"] == "sk-x"
    with pytest.raises(TypeError):
        cfg.environ["OPENAI_API_KEY"] = "changed"  # type: ignore[index]
