"""Test the repository_dispatch notifier."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from egresswatch.config import DispatchSettings
from egresswatch.notifiers import GitHubDispatchNotifier
from egresswatch.schemas import NotificationPayload


def _session(status=204, text=""):
    response = MagicMock(status=status)
    response.text = AsyncMock(return_value=text)
    session = MagicMock(closed=False)
    session.post.return_value.__aenter__.return_value = response
    return session


@pytest.fixture
def dispatch_settings():
    return DispatchSettings(
        EGRESSWATCH_GHA_TOKEN="secret",
        EGRESSWATCH_GHA_OWNER="acme",
        EGRESSWATCH_GHA_REPO="policies",
        EGRESSWATCH_GHA_EVENT_TYPE="receiveNewIntents",
    )


@pytest.fixture
def payloads():
    return [NotificationPayload(
        client_name="pay-svc",
        client_namespace="default",
        client_kind="Deployment",
        dns_name="api.stripe.com",
    )]


@pytest.mark.asyncio
async def test_send_success(dispatch_settings, payloads):
    session = _session(204)
    notifier = GitHubDispatchNotifier(dispatch_settings, "prod-eu", session=session)

    assert await notifier.send(payloads) is True

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.github.com/repos/acme/policies/dispatches"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["json"] == {
        "event_type": "prod-eu-receiveNewIntents",
        "client_payload": {
            "cluster": "prod-eu",
            "intents": [{
                "client_name": "pay-svc",
                "client_namespace": "default",
                "client_kind": "Deployment",
                "dns_name": "api.stripe.com",
            }],
        },
    }
    assert kwargs["timeout"].total == 10


@pytest.mark.asyncio
async def test_send_unexpected_status(dispatch_settings, payloads, log_messages):
    notifier = GitHubDispatchNotifier(dispatch_settings, "prod-eu", session=_session(500, "boom"))

    assert await notifier.send(payloads) is False
    errors = [r["message"] for r in log_messages if r["level"].name == "ERROR"]
    assert any("500" in m for m in errors)


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
async def test_send_transport_error(dispatch_settings, payloads, error):
    session = _session()
    session.post.side_effect = error
    notifier = GitHubDispatchNotifier(dispatch_settings, "prod-eu", session=session)

    assert await notifier.send(payloads) is False


@pytest.mark.asyncio
async def test_close_only_open_session(dispatch_settings):
    session = _session()
    session.close = AsyncMock()
    notifier = GitHubDispatchNotifier(dispatch_settings, "prod-eu", session=session)

    await notifier.close()
    session.close.assert_awaited_once()
