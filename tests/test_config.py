from __future__ import annotations

import pytest

from seriesmeta.config import load_provider_settings, load_settings
from seriesmeta.metadata.models import Provider


def test_defaults_without_environment() -> None:
    settings = load_settings(env={})

    assert set(settings.providers) == {Provider.KODANSHA, Provider.NAUTILJON}
    kodansha = settings.providers[Provider.KODANSHA]
    assert kodansha.enabled is True
    assert kodansha.fetch_series_covers is True
    assert kodansha.fetch_book_covers is True
    assert kodansha.rate_limit.permits_per_period == 10
    assert kodansha.retry.max_attempts == 3
    assert kodansha.retry.backoff_seconds == 0.5
    assert settings.providers[Provider.NAUTILJON].rate_limit.permits_per_period == 5
    assert settings.http_timeout_seconds == 20.0
    assert settings.name_match_threshold == 90.0


def test_provider_overrides_are_scoped_by_prefix() -> None:
    env = {
        "SERIESMETA_NAUTILJON_ENABLED": "false",
        "SERIESMETA_KODANSHA_FETCH_BOOK_COVERS": "no",
        "SERIESMETA_KODANSHA_RATE_LIMIT_PERMITS": "2",
        "SERIESMETA_KODANSHA_RATE_LIMIT_PERIOD_SECONDS": "0.5",
        "SERIESMETA_KODANSHA_RATE_LIMIT_TIMEOUT_SECONDS": "1",
        "SERIESMETA_KODANSHA_RETRY_MAX_ATTEMPTS": "5",
        "SERIESMETA_KODANSHA_RETRY_BACKOFF_SECONDS": "0.1",
        "SERIESMETA_USER_AGENT": "my-library/1.0",
        "SERIESMETA_HTTP_TIMEOUT_SECONDS": "7.5",
        "SERIESMETA_NAME_MATCH_THRESHOLD": "80",
    }

    settings = load_settings(env=env)
    kodansha = settings.providers[Provider.KODANSHA]

    assert settings.providers[Provider.NAUTILJON].enabled is False
    assert kodansha.enabled is True
    assert kodansha.fetch_book_covers is False
    assert kodansha.fetch_series_covers is True
    assert kodansha.rate_limit.permits_per_period == 2
    assert kodansha.rate_limit.period_seconds == 0.5
    assert kodansha.rate_limit.timeout_seconds == 1.0
    assert kodansha.retry.max_attempts == 5
    assert kodansha.retry.backoff_seconds == 0.1
    assert settings.user_agent == "my-library/1.0"
    assert settings.http_timeout_seconds == 7.5
    assert settings.name_match_threshold == 80.0


def test_blank_values_fall_back_to_defaults() -> None:
    settings = load_provider_settings(Provider.KODANSHA, env={"SERIESMETA_KODANSHA_RETRY_MAX_ATTEMPTS": "  "})

    assert settings.retry.max_attempts == 3


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SERIESMETA_KODANSHA_ENABLED", "maybe"),
        ("SERIESMETA_KODANSHA_RATE_LIMIT_PERMITS", "ten"),
        ("SERIESMETA_KODANSHA_RATE_LIMIT_PERMITS", "0"),
        ("SERIESMETA_KODANSHA_RETRY_BACKOFF_SECONDS", "-1"),
    ],
)
def test_invalid_values_name_the_variable(name: str, value: str) -> None:
    with pytest.raises(ValueError, match=name):
        load_provider_settings(Provider.KODANSHA, env={name: value})


@pytest.mark.parametrize("value", ["150", "-5", "high"])
def test_name_match_threshold_is_a_percentage(value: str) -> None:
    with pytest.raises(ValueError, match="SERIESMETA_NAME_MATCH_THRESHOLD"):
        load_settings(env={"SERIESMETA_NAME_MATCH_THRESHOLD": value})

    assert load_settings(env={"SERIESMETA_NAME_MATCH_THRESHOLD": "100"}).name_match_threshold == 100.0


def test_process_environment_is_read_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERIESMETA_KODANSHA_FETCH_SERIES_COVERS", "0")

    assert load_provider_settings(Provider.KODANSHA).fetch_series_covers is False


def test_load_env_reads_dotenv_from_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # noqa: ANN001
    import seriesmeta.utils.env as env_mod

    (tmp_path / ".env").write_text("SERIESMETA_USER_AGENT=from-dotenv\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(env_mod, "__file__", str(tmp_path / "pkg" / "utils" / "env.py"))
    monkeypatch.delenv("SERIESMETA_USER_AGENT", raising=False)

    loaded = env_mod.load_env()

    assert loaded is not None and loaded.name == ".env"
    assert load_settings().user_agent == "from-dotenv"
    monkeypatch.delenv("SERIESMETA_USER_AGENT", raising=False)
