import pytest

from env import ConfigError, get_env, reset_env_caches


def test_env_defaults():
    env = get_env()
    assert env.verbose is False
    assert env.quiet is False
    assert env.max_retries == 3
    assert env.retry_delay == 2.0
    assert env.default_rating == 3.0
    assert env.rating_labels == {"great": 1.0, "good": 2.0, "ok": 3.0, "bad": 4.0}
    assert env.db_path.name == "ratings.json"


def test_env_is_cached_until_reset(monkeypatch):
    first = get_env()
    monkeypatch.setenv("SPOTILITY_MAX_RETRIES", "5")
    assert get_env() is first

    reset_env_caches()
    assert get_env().max_retries == 5


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SPOTILITY_VERBOSE", "1")
    monkeypatch.setenv("SPOTILITY_RETRY_DELAY_SEC", "0.5")
    monkeypatch.setenv("SPOTILITY_DEFAULT_RATING", "2.5")
    monkeypatch.setenv("SPOTILITY_RATING_LABELS", "love=1,meh=3")
    monkeypatch.setenv("SPOTILITY_DB_PATH", str(tmp_path / "db.json"))

    env = get_env()

    assert env.verbose is True
    assert env.retry_delay == 0.5
    assert env.default_rating == 2.5
    assert env.rating_labels == {"love": 1.0, "meh": 3.0}
    assert env.db_path == tmp_path / "db.json"


def test_bad_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("SPOTILITY_MAX_RETRIES", "lots")
    assert get_env().max_retries == 3


def test_bad_labels_are_config_error(monkeypatch):
    monkeypatch.setenv("SPOTILITY_RATING_LABELS", "great")
    with pytest.raises(ConfigError):
        get_env().rating_labels


def test_credentials_required_lazily(monkeypatch):
    env = get_env()
    with pytest.raises(ConfigError):
        env.client_id

    monkeypatch.setenv("SPOTIFY_API_ID", "abc")
    reset_env_caches()
    assert get_env().client_id == "abc"


def test_as_dict_hides_secrets(monkeypatch):
    monkeypatch.setenv("SPOTIFY_API_SECRET", "hunter2")
    dumped = get_env().as_dict()
    assert dumped["API"]["client_secret"] == "set"
    assert "hunter2" not in repr(dumped)
