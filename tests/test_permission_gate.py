from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ankidroid_bridge.core.domain.errors import BridgeError
from ankidroid_bridge.core.domain.models import Failure, PermissionResult, Success
from ankidroid_bridge.core.services.permission_gate import PermissionGate, retry_once
from tests.conftest import PERMISSION_NAME


def make_gate(collaborator, host, settings, capable=True) -> PermissionGate:
    return PermissionGate(collaborator, host, settings, platform_check=lambda: capable)


def test_capability_follows_platform_check(collaborator, host, settings):
    assert make_gate(collaborator, host, settings).has_capability() is True
    assert make_gate(collaborator, host, settings, capable=False).has_capability() is False


def test_capability_can_be_forced(collaborator, host, settings):
    forced = settings.model_copy(update={"force_platform_support": True})
    assert make_gate(collaborator, host, forced, capable=False).has_capability() is True


@pytest.mark.asyncio
async def test_status_checks_named_permission(collaborator, host, settings):
    assert await make_gate(collaborator, host, settings).current_permission_status() is True
    host.check.assert_awaited_once_with(PERMISSION_NAME)


@pytest.mark.asyncio
async def test_status_fails_closed_when_name_lookup_raises(collaborator, host, settings):
    collaborator.get_permission_name.side_effect = RuntimeError("provider missing")

    assert await make_gate(collaborator, host, settings).current_permission_status() is False
    host.check.assert_not_awaited()


@pytest.mark.asyncio
async def test_status_fails_closed_when_name_is_empty(collaborator, host, settings):
    collaborator.get_permission_name.return_value = None

    assert await make_gate(collaborator, host, settings).current_permission_status() is False


@pytest.mark.asyncio
async def test_status_is_false_when_host_check_raises(collaborator, host, settings):
    host.check.side_effect = RuntimeError("boom")

    assert await make_gate(collaborator, host, settings).current_permission_status() is False


@pytest.mark.asyncio
async def test_status_is_false_on_unsupported_platform(collaborator, host, settings):
    assert await make_gate(collaborator, host, settings, capable=False).current_permission_status() is False
    collaborator.get_permission_name.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_returns_host_answer_verbatim(collaborator, host, settings):
    host.request.return_value = PermissionResult.NEVER_ASK_AGAIN

    result = await make_gate(collaborator, host, settings).request_permission("to add notes")

    assert result is PermissionResult.NEVER_ASK_AGAIN
    host.request.assert_awaited_once_with(PERMISSION_NAME, "to add notes")


@pytest.mark.asyncio
async def test_request_accepts_plain_string_answers(collaborator, host, settings):
    host.request.return_value = "granted"

    assert await make_gate(collaborator, host, settings).request_permission() is PermissionResult.GRANTED


@pytest.mark.asyncio
async def test_request_denied_without_permission_name(collaborator, host, settings):
    collaborator.get_permission_name.side_effect = RuntimeError("provider missing")

    assert await make_gate(collaborator, host, settings).request_permission() is PermissionResult.DENIED
    host.request.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_denied_on_unsupported_platform(collaborator, host, settings):
    result = await make_gate(collaborator, host, settings, capable=False).request_permission()

    assert result is PermissionResult.DENIED
    collaborator.get_permission_name.assert_not_awaited()


@pytest.mark.asyncio
async def test_ensure_requests_once_when_not_granted(collaborator, host, settings):
    host.check.return_value = False

    assert await make_gate(collaborator, host, settings).ensure_permission("why") is True
    host.request.assert_awaited_once_with(PERMISSION_NAME, "why")


@pytest.mark.asyncio
async def test_ensure_false_when_request_denied(collaborator, host, settings):
    host.check.return_value = False
    host.request.return_value = PermissionResult.DENIED

    assert await make_gate(collaborator, host, settings).ensure_permission() is False


@pytest.mark.asyncio
async def test_ensure_does_not_prompt_when_disabled(collaborator, host, settings):
    host.check.return_value = False
    no_prompt = settings.model_copy(update={"request_permission_on_demand": False})

    assert await make_gate(collaborator, host, no_prompt).ensure_permission() is False
    host.request.assert_not_awaited()


@pytest.mark.asyncio
async def test_ensure_logs_when_prompting_disabled(collaborator, host, settings, caplog):
    host.check.return_value = False
    no_prompt = settings.model_copy(update={"request_permission_on_demand": False})

    with caplog.at_level("WARNING"):
        await make_gate(collaborator, host, no_prompt).ensure_permission()

    assert "on-demand requests are disabled" in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        BridgeError.PERMISSION_DENIED,
        BridgeError.UNSUPPORTED_PLATFORM,
        BridgeError.IDENTIFIER_MISSING,
    ],
)
async def test_retry_once_returns_final_errors_at_once(error):
    attempt = AsyncMock(side_effect=[Failure(error), Success(["Default"])])

    assert await retry_once(attempt) == Failure(error)
    assert attempt.await_count == 1


@pytest.mark.asyncio
async def test_retry_once_returns_second_success():
    attempt = AsyncMock(side_effect=[Failure(BridgeError.REMOTE_UNKNOWN_ERROR), Success(["Default"])])

    outcome = await retry_once(attempt)

    assert outcome == Success(["Default"])
    assert attempt.await_count == 2


@pytest.mark.asyncio
async def test_retry_once_surfaces_second_failure():
    attempt = AsyncMock(
        side_effect=[
            Failure(BridgeError.PERMISSION_DENIED),
            Failure(BridgeError.REMOTE_UNKNOWN_ERROR, detail="second"),
            Success("never reached"),
        ]
    )

    outcome = await retry_once(attempt)

    assert outcome == Failure(BridgeError.REMOTE_UNKNOWN_ERROR, detail="second")
    assert attempt.await_count == 2


@pytest.mark.asyncio
async def test_retry_once_skips_retry_on_success():
    attempt = AsyncMock(return_value=Success("Korean"))

    assert await retry_once(attempt) == Success("Korean")
    assert attempt.await_count == 1
