"""Shared fixtures for web API tests."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from jose import jwt


@pytest.fixture
def jwt_secret():
    return "test-nextauth-secret"


def _make_auth_token(jwt_secret, user_id, email="u@test.com", name="U"):
    return jwt.encode(
        {"sub": user_id, "email": email, "name": name},
        jwt_secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_token(jwt_secret):
    return _make_auth_token(jwt_secret, "user-123", "test@example.com", "Test")


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def auth_token_b(jwt_secret):
    """Second user token for isolation tests."""
    return _make_auth_token(jwt_secret, "user-456", "b@test.com", "UserB")


@pytest.fixture
def auth_headers_b(auth_token_b):
    return {"Authorization": f"Bearer {auth_token_b}"}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(f"paths:\n  db_path: {tmp_path / 'web.db'}\n")
    return path


@pytest.fixture
def queue(store):
    from journal import AnalysisQueue, SentimentPipeline

    q = AnalysisQueue(SentimentPipeline(store), max_workers=1)
    yield q
    q.shutdown(wait=True)


@pytest.fixture
def client(jwt_secret, config_file, store, queue):
    """Test client on a tmp store; enrichment disabled."""
    from journal import AnalyticsAggregator
    from journal.sentiment import SentimentScorer
    from web import deps
    from web.app import app

    env = {"NEXTAUTH_SECRET": jwt_secret, "REFLECT_CONFIG": str(config_file)}
    overrides = {
        deps.get_store: lambda: store,
        deps.get_scorer: lambda: SentimentScorer(),
        deps.get_pipeline: lambda: queue.pipeline,
        deps.get_queue: lambda: queue,
        deps.get_aggregator: lambda: AnalyticsAggregator(store),
        deps.get_enrichment: lambda: None,
    }

    with patch.dict(os.environ, env):
        deps.get_config.cache_clear()
        app.dependency_overrides.update(overrides)
        yield TestClient(app)
        app.dependency_overrides.clear()
        deps.get_config.cache_clear()
