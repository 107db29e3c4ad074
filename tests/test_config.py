"""Tests for settings."""

from food_or_trash.config import Settings


def test_classifier_configured_per_provider() -> None:
    unset = Settings(
        _env_file=None, classifier_provider="openai", openai_api_key=None
    )
    openai = unset.model_copy(update={"openai_api_key": "sk-test"})

    assert not unset.classifier_configured()
    assert openai.classifier_configured()

    workers = Settings(
        _env_file=None,
        classifier_provider="workers_ai",
        openai_api_key="sk-test",
        cloudflare_account_id="acct",
        cloudflare_api_key=None,
    )
    assert not workers.classifier_configured()
    assert workers.model_copy(
        update={"cloudflare_api_key": "cf-key"}
    ).classifier_configured()


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("CLASSIFIER_PROVIDER", "workers_ai")
    monkeypatch.setenv("FUZZY_THRESHOLD", "0.25")
    monkeypatch.setenv("MAX_QUERY_LENGTH", "120")

    settings = Settings(_env_file=None)

    assert settings.classifier_provider == "workers_ai"
    assert settings.fuzzy_threshold == 0.25
    assert settings.max_query_length == 120
