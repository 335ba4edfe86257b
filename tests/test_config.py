from server.config import Provider, ProviderConfig, resolve_provider_config


def test_openai_key_selects_openai():
    config = resolve_provider_config({"OPENAI_API_KEY": "sk-1"})
    assert config == ProviderConfig(Provider.OPENAI, "sk-1")


def test_gemini_key_selects_gemini():
    config = resolve_provider_config({"GEMINI_API_KEY": "g-1"})
    assert config == ProviderConfig(Provider.GEMINI, "g-1")


def test_openai_wins_when_both_keys_present():
    config = resolve_provider_config({"OPENAI_API_KEY": "sk-1", "GEMINI_API_KEY": "g-1"})
    assert config.provider is Provider.OPENAI
    assert config.api_key == "sk-1"


def test_no_keys_returns_none():
    assert resolve_provider_config({}) is None


def test_empty_openai_key_falls_through_to_gemini():
    config = resolve_provider_config({"OPENAI_API_KEY": "", "GEMINI_API_KEY": "g-1"})
    assert config.provider is Provider.GEMINI


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    config = resolve_provider_config()
    assert config == ProviderConfig(Provider.GEMINI, "from-env")


def test_provider_value_is_display_name():
    assert Provider.OPENAI.value == "OpenAI"
    assert Provider.GEMINI.value == "Gemini"
