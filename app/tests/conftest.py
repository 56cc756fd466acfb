import os

# Settings() is built at import time; give it a database to point at
# (never connected to: tests don't enter the app lifespan).
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "feedback_test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DISABLE_AUTH", "false")

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.core.llm.base import CompletionModel
from app.tests.fakes import (
    FakeQuotaService,
    FakeStore,
    FakeUploadService,
    make_service,
)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def quota() -> FakeQuotaService:
    return FakeQuotaService()


@pytest.fixture
def uploads() -> FakeUploadService:
    return FakeUploadService()


@pytest.fixture
def override_deps(store, quota, uploads):
    """
    Point the app's collaborators at fakes. Yields a setter so a test can
    swap the completion model or embedder.
    """
    from app.api import deps
    from app.main import app

    def apply(model: Optional[CompletionModel] = None, embedder=None):
        service = make_service(store=store, embedder=embedder, model=model)
        app.dependency_overrides[deps.get_batch_service] = lambda: service
        app.dependency_overrides[deps.get_quota_service] = lambda: quota
        app.dependency_overrides[deps.get_upload_service] = lambda: uploads
        app.dependency_overrides[deps.get_feedback_store] = lambda: store

    apply()
    yield apply
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    from app.main import app

    # no context manager: the lifespan (Postgres probe) is not entered
    return TestClient(app)
