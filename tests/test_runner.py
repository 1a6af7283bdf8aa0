from __future__ import annotations

import asyncio

import pytest

from serenity.pipeline.runner import TaskRunner
from serenity.pipeline.steps import StepRunner
from serenity.utils.error_handler import PipelineError


def test_redelivery_replays_completed_steps() -> None:
    calls = {"first": 0, "second": 0}

    async def handler(event: dict, step: StepRunner) -> str:
        def first() -> str:
            calls["first"] += 1
            return event["value"].upper()

        def second() -> str:
            calls["second"] += 1
            if calls["second"] == 1:
                raise RuntimeError("transient failure")
            return "done"

        value = await step.run("first", first)
        status = await step.run("second", second)
        return f"{value}:{status}"

    runner = TaskRunner(max_attempts=3)
    runner.register("fn", "test/event", handler)

    assert asyncio.run(runner.invoke("test/event", {"value": "abc"})) == "ABC:done"
    assert calls == {"first": 1, "second": 2}
    assert len(runner.cache) == 0


def test_exhausted_attempts_raise_pipeline_error() -> None:
    attempts: list[int] = []

    async def handler(event: object, step: StepRunner) -> None:
        attempts.append(1)
        raise ValueError("always broken")

    runner = TaskRunner(max_attempts=2)
    runner.register("broken", "test/event", handler)

    with pytest.raises(PipelineError) as exc_info:
        asyncio.run(runner.invoke("test/event", {}))

    assert len(attempts) == 2
    assert exc_info.value.function_id == "broken"
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_send_runs_every_registered_function() -> None:
    async def upper(event: str, step: StepRunner) -> str:
        return event.upper()

    async def reverse(event: str, step: StepRunner) -> str:
        return event[::-1]

    runner = TaskRunner()
    runner.register("upper", "text/received", upper)
    runner.register("reverse", "text/received", reverse)

    assert asyncio.run(runner.send("text/received", "calm")) == ["CALM", "mlac"]
    assert asyncio.run(runner.send("unknown/event", "calm")) == []


def test_invoke_requires_a_single_function() -> None:
    runner = TaskRunner()

    with pytest.raises(LookupError):
        asyncio.run(runner.invoke("missing/event", {}))


def test_event_payload_is_parsed_before_delivery() -> None:
    async def handler(event: int, step: StepRunner) -> int:
        return event * 2

    runner = TaskRunner()
    runner.register("double", "number/sent", handler, parse_event=int)

    assert asyncio.run(runner.invoke("number/sent", "21")) == 42


def test_background_delivery_can_be_drained() -> None:
    seen: list[str] = []

    async def handler(event: str, step: StepRunner) -> None:
        seen.append(event)

    runner = TaskRunner()
    runner.register("record", "mood/updated", handler)

    async def scenario() -> None:
        runner.send_background("mood/updated", "better")
        await runner.drain()

    asyncio.run(scenario())
    assert seen == ["better"]


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TaskRunner(max_attempts=0)


def test_background_parse_failures_are_logged(log_records) -> None:
    async def handler(event: int, step: StepRunner) -> int:
        return event

    runner = TaskRunner()
    runner.register("count", "number/sent", handler, parse_event=int)

    async def scenario() -> list:
        task = runner.send_background("number/sent", "not a number")
        await runner.drain()
        return task.result()

    assert asyncio.run(scenario()) == []
    errors = [r for r in log_records if r["level"].name == "ERROR"]
    assert errors[0]["message"] == "Background delivery of number/sent failed"
    assert isinstance(errors[0]["exception"].value, ValueError)
