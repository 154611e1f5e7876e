"""
Module: test_loops.py
Description: Unit tests for the emit and retry loops.

Passes are driven with run_once(); a few tests start the periodic
tasks to check scheduling and shutdown.
"""

import asyncio

import pytest

from hookme.delivery.loops import EmitLoop, PeriodicTask, RetryLoop
from hookme.exceptions import EventValidationError
from hookme.models.event import WebhookEvent


@pytest.fixture
def emit_loop(engine, memory_store):
    return EmitLoop(engine, memory_store, interval=0.01, request_delay=0, cooldown=0)


@pytest.fixture
def retry_loop(engine, retry_set):
    return RetryLoop(engine, retry_set, interval=0.01, request_delay=0)


class TestEnqueue:

    def test_enqueue_persists_and_queues(self, emit_loop, memory_store):
        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"message": "hi"}))

        assert emit_loop.queue.ids() == [event.id]
        assert memory_store.get(event.id) is event

    def test_enqueue_rejects_invalid_event(self, emit_loop, memory_store):
        with pytest.raises(EventValidationError, match="provider is required"):
            emit_loop.enqueue(WebhookEvent(provider="", payload={"message": "hi"}))

        assert len(emit_loop.queue) == 0
        assert len(memory_store) == 0


class TestEmitLoop:

    @pytest.mark.asyncio
    async def test_drain_delivers_in_order(self, emit_loop, fake_transport, memory_store):
        events = [emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": n})) for n in range(5)]

        await emit_loop.run_once()

        assert fake_transport.calls == [event.id for event in events]
        assert len(emit_loop.queue) == 0
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_failure_requeued_after_cooldown(self, emit_loop, fake_transport, memory_store, retry_set):
        fake_transport.status_code = 500
        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"message": "hi"}))

        await emit_loop.run_once()

        assert len(emit_loop.queue) == 0
        assert emit_loop.pending_requeues == 1
        assert memory_store.has(event.id)
        assert event.id in retry_set

        await asyncio.sleep(0.01)

        assert emit_loop.queue.ids() == [event.id]
        assert emit_loop.pending_requeues == 0

    @pytest.mark.asyncio
    async def test_retry_delivery_cancels_pending_requeue(self, emit_loop, retry_loop, fake_transport, memory_store):
        fake_transport.status_code = 500
        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"message": "hi"}))
        await emit_loop.run_once()

        fake_transport.status_code = 200
        await retry_loop.run_once()
        await asyncio.sleep(0.01)
        await emit_loop.run_once()

        assert fake_transport.calls == [event.id, event.id]
        assert len(emit_loop.queue) == 0
        assert not memory_store.has(event.id)

    @pytest.mark.asyncio
    async def test_requeued_event_delivered_by_retry_is_skipped(self, emit_loop, retry_loop, fake_transport, memory_store):
        fake_transport.status_code = 500
        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"message": "hi"}))
        await emit_loop.run_once()
        await asyncio.sleep(0.01)
        assert emit_loop.queue.ids() == [event.id]

        fake_transport.status_code = 200
        await retry_loop.run_once()
        await emit_loop.run_once()

        assert fake_transport.calls == [event.id, event.id]
        assert len(emit_loop.queue) == 0

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_pass(self, emit_loop, fake_transport, memory_store):
        first = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": 1}))
        second = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": 2}))
        fake_transport.fail_ids = {first.id}

        await emit_loop.run_once()

        assert fake_transport.calls == [first.id, second.id]
        assert memory_store.has(first.id)
        assert not memory_store.has(second.id)

    @pytest.mark.asyncio
    async def test_unexpected_error_requeues(self, emit_loop, engine, memory_store, monkeypatch):
        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": 1}))

        async def boom(*args, **kwargs):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(engine, "attempt", boom)
        await emit_loop.run_once()

        assert emit_loop.pending_requeues == 1
        assert memory_store.has(event.id)

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_requeues(self, emit_loop, fake_transport):
        emit_loop.cooldown = 60
        fake_transport.status_code = 500
        emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": 1}))

        await emit_loop.run_once()
        assert emit_loop.pending_requeues == 1

        await emit_loop.stop()

        assert emit_loop.pending_requeues == 0

    @pytest.mark.asyncio
    async def test_started_loop_drains_queue(self, emit_loop, fake_transport, memory_store):
        emit_loop.start()
        assert emit_loop.running

        event = emit_loop.enqueue(WebhookEvent(provider="telegram", payload={"n": 1}))
        await asyncio.sleep(0.05)
        await emit_loop.stop()

        assert fake_transport.calls == [event.id]
        assert not memory_store.has(event.id)
        assert not emit_loop.running


class TestRetryLoop:

    @pytest.mark.asyncio
    async def test_successful_retry_clears_state(self, engine, retry_loop, fake_transport, memory_store, retry_set, sample_event):
        engine.backoff(sample_event)

        await retry_loop.run_once()

        assert sample_event.id not in retry_set
        assert not memory_store.has(sample_event.id)
        assert fake_transport.calls == [sample_event.id]

    @pytest.mark.asyncio
    async def test_still_failing_event_stays_for_next_pass(self, engine, retry_loop, fake_transport, memory_store, retry_set, sample_event):
        engine.backoff(sample_event)
        fake_transport.status_code = 500

        await retry_loop.run_once()
        await retry_loop.run_once()

        assert sample_event.id in retry_set
        assert len(retry_set) == 1
        assert memory_store.has(sample_event.id)
        assert len(fake_transport.calls) == 2

    @pytest.mark.asyncio
    async def test_failure_isolated_per_entry(self, engine, retry_loop, fake_transport, retry_set):
        failing = WebhookEvent(provider="telegram", payload={"n": 1})
        passing = WebhookEvent(provider="telegram", payload={"n": 2})
        engine.backoff(failing)
        engine.backoff(passing)
        fake_transport.fail_ids = {failing.id}

        await retry_loop.run_once()

        assert failing.id in retry_set
        assert passing.id not in retry_set

    @pytest.mark.asyncio
    async def test_in_flight_entry_is_left_alone(self, engine, retry_loop, fake_transport, retry_set, sample_event):
        engine.backoff(sample_event)
        fake_transport.gate = asyncio.Event()

        direct = asyncio.create_task(engine.attempt(sample_event))
        await asyncio.sleep(0)

        await retry_loop.run_once()

        assert fake_transport.calls == [sample_event.id]
        assert sample_event.id in retry_set

        fake_transport.gate.set()
        await direct

        assert sample_event.id not in retry_set


class TestPeriodicTask:

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PeriodicTask(0)

    @pytest.mark.asyncio
    async def test_pass_errors_do_not_kill_the_loop(self):
        calls = []

        class Flaky(PeriodicTask):
            async def run_once(self):
                calls.append(1)
                raise RuntimeError("boom")

        task = Flaky(0.01)
        task.start()
        await asyncio.sleep(0.05)

        assert task.running
        await task.stop()

        assert len(calls) >= 2
