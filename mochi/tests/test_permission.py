"""Tests for the motion permission gate and prompt."""

from __future__ import annotations

import asyncio

import pytest

from mochi.state.permission import (
    DENIED_NOTICE,
    Permission,
    PermissionGate,
    PermissionPrompt,
)


async def _yes() -> bool:
    return True


async def _no() -> bool:
    return False


async def _broken() -> bool:
    raise RuntimeError("prompt exploded")


class TestResolve:
    def test_starts_ungranted(self):
        gate = PermissionGate()
        assert gate.state == Permission.UNGRANTED
        assert not gate.granted

    def test_grant(self):
        gate = PermissionGate()
        assert gate.resolve(True) == Permission.GRANTED
        assert gate.granted
        assert gate.take_notice() is None

    def test_denial_notice_once(self):
        gate = PermissionGate()
        gate.resolve(False)
        assert gate.denied
        assert gate.take_notice() == DENIED_NOTICE
        assert gate.take_notice() is None
        gate.resolve(False)
        assert gate.take_notice() is None

    def test_late_denial_does_not_revoke(self):
        gate = PermissionGate(granted=True)
        gate.resolve(False)
        assert gate.granted


class TestRequest:
    @pytest.mark.asyncio
    async def test_granted(self):
        gate = PermissionGate()
        assert await gate.request(_yes) == Permission.GRANTED

    @pytest.mark.asyncio
    async def test_denied(self):
        gate = PermissionGate()
        assert await gate.request(_no) == Permission.UNGRANTED
        assert gate.denied

    @pytest.mark.asyncio
    async def test_failing_prompt_counts_as_denied(self):
        gate = PermissionGate()
        assert await gate.request(_broken) == Permission.UNGRANTED
        assert gate.denied
        assert not gate.requesting

    @pytest.mark.asyncio
    async def test_already_granted_skips_prompt(self):
        calls = 0

        async def counting() -> bool:
            nonlocal calls
            calls += 1
            return True

        gate = PermissionGate(granted=True)
        await gate.request(counting)
        assert calls == 0


class TestAsk:
    @pytest.mark.asyncio
    async def test_returns_answer_without_applying(self):
        gate = PermissionGate()
        assert await gate.ask(_yes) is True
        assert gate.state == Permission.UNGRANTED
        assert await gate.ask(_no) is False
        assert not gate.denied

    @pytest.mark.asyncio
    async def test_failing_prompt_is_a_no(self):
        gate = PermissionGate()
        assert await gate.ask(_broken) is False
        assert not gate.requesting

    @pytest.mark.asyncio
    async def test_no_prompt_when_granted(self):
        assert await PermissionGate(granted=True).ask(_yes) is None


class TestPrompt:
    @pytest.mark.asyncio
    async def test_answer_resolves_request(self):
        gate = PermissionGate()
        prompt = PermissionPrompt()
        task = asyncio.create_task(gate.request(prompt.ask))
        await asyncio.sleep(0)
        assert prompt.pending
        assert gate.requesting
        assert prompt.answer(True)
        assert await task == Permission.GRANTED
        assert not prompt.pending

    @pytest.mark.asyncio
    async def test_only_requester_waits(self):
        gate = PermissionGate()
        prompt = PermissionPrompt()
        task = asyncio.create_task(gate.request(prompt.ask))
        ticks = 0
        for _ in range(5):
            await asyncio.sleep(0)
            ticks += 1
        assert ticks == 5
        assert not task.done()
        prompt.answer(False)
        assert await task == Permission.UNGRANTED

    @pytest.mark.asyncio
    async def test_second_request_while_pending_is_noop(self):
        gate = PermissionGate()
        prompt = PermissionPrompt()
        first = asyncio.create_task(gate.request(prompt.ask))
        await asyncio.sleep(0)
        assert await gate.request(prompt.ask) == Permission.UNGRANTED
        prompt.answer(True)
        assert await first == Permission.GRANTED

    def test_answer_without_pending_prompt(self):
        assert not PermissionPrompt().answer(True)
