import asyncio

import pytest

from release_tool.core.event_bus import EventBus, EventHandler
from release_tool.models.events import EventType, JobPayload, PairPayload
from release_tool.models.job import DeploymentJob


class RecordingHandler(EventHandler):

    def __init__(self, log):
        super().__init__()
        self.log = log

    def on_will_start_job(self, event):
        self.log.append(("sync", event.type.value))

    async def on_did_finish_job(self, event):
        self.log.append(("async", event.type.value))


def _job():
    return DeploymentJob(configs=["staging"], platforms=["ios"])


def test_handler_methods_are_dispatched_by_event_type():
    log = []
    bus = EventBus()
    bus.register(RecordingHandler(log))

    job = _job()
    asyncio.run(bus.emit(EventType.WILL_START_JOB, JobPayload(job)))
    asyncio.run(bus.emit(EventType.WILL_BUILD, PairPayload(job, "staging", "ios")))
    asyncio.run(bus.emit(EventType.DID_FINISH_JOB, JobPayload(job)))

    assert log == [("sync", "will_start_job"), ("async", "did_finish_job")]


def test_observers_are_notified_in_registration_order():
    log = []
    bus = EventBus()
    bus.register(lambda event: log.append("first"))

    async def second(event):
        log.append("second")

    bus.register(second)

    event = asyncio.run(bus.emit(EventType.WILL_START_JOB, JobPayload(_job())))

    assert log == ["first", "second"]
    assert event.type == EventType.WILL_START_JOB
    assert event.job.configs == ["staging"]


def test_failing_observer_does_not_stop_delivery(caplog):
    log = []
    bus = EventBus()

    def broken(event):
        raise ValueError("boom")

    bus.register(broken)
    bus.register(lambda event: log.append(event.type))

    asyncio.run(bus.emit(EventType.WILL_START_JOB, JobPayload(_job())))

    assert log == [EventType.WILL_START_JOB]
    assert "failed on will_start_job" in caplog.text


def test_unregister_and_invalid_observers():
    bus = EventBus()
    observer = RecordingHandler([])
    bus.register(observer)
    bus.unregister(observer)

    assert bus.observers == []

    with pytest.raises(TypeError):
        bus.register("not callable")


def test_pair_payload_label():
    payload = PairPayload(_job(), "staging", "ios")

    assert payload.label == "staging (ios)"
