import logging

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_modules(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached environment views.
    """

    keys = [
        "SPOTILITY_HOME",
        "SPOTILITY_LOGS_DIR",
        "SPOTILITY_AUTH_DIR",
        "SPOTILITY_DATA_DIR",
        "SPOTILITY_DB_PATH",
        "SPOTILITY_COMMAND",
        "SPOTILITY_RUN_ID",
        "SPOTILITY_VERBOSE",
        "SPOTILITY_QUIET",
        "SPOTILITY_MAX_RETRIES",
        "SPOTILITY_RETRY_DELAY_SEC",
        "SPOTILITY_RATING_LABELS",
        "SPOTILITY_DEFAULT_RATING",
        "SPOTIFY_API_ID",
        "SPOTIFY_API_SECRET",
        "SPOTIFY_API_USERNAME",
        "LOG_LEVEL",
        "LOG_RETENTION",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Never write logs/tokens/databases into the checkout
    monkeypatch.setenv("SPOTILITY_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SPOTILITY_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SPOTILITY_AUTH_DIR", str(tmp_path / "auth"))
    monkeypatch.setenv("SPOTILITY_DATA_DIR", str(tmp_path / "data"))

    from env import reset_env_caches

    reset_env_caches()

    # Reset logger global state
    import logger.state

    logger.state.INITIALIZED = False
    logger.state.COMMAND = None
    logger.state.LOG_FILE_PATH = None

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    yield

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    reset_env_caches()
