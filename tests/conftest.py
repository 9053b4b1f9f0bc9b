"""Shared fixtures."""

from datetime import datetime, timezone

import pytest
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from egresswatch.schemas import ClientIdentity, ExternalTrafficIntent
from egresswatch.store import IntentStore

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    return IntentStore(db_engine, retention_days=30)


@pytest.fixture
def make_intent():
    def _make(
        name="pay-svc",
        namespace="default",
        kind="Deployment",
        dns_name="api.stripe.com",
        ips=("54.1.2.3",),
        observed_at=NOW,
    ):
        return ExternalTrafficIntent(
            client=ClientIdentity(name=name, namespace=namespace, kind=kind),
            dns_name=dns_name,
            ips=set(ips),
            observed_at=observed_at,
        )
    return _make


@pytest.fixture
def log_messages():
    """Collect formatted loguru records for assertions."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)
