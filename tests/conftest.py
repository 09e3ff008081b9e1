from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch) -> None:
    # Run from an empty directory so a developer's local .env cannot leak a real key.
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    # Settings and the OpenAI client are cached per process; clear so each test starts clean.
    from app.core.llm.deps import get_openai_client
    from app.core.settings import get_settings

    get_settings.cache_clear()
    get_openai_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_openai_client.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
