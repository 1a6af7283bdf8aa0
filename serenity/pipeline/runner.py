"""Event-driven task runner with at-least-once redelivery.

Pipeline functions are registered against event names.  Sending an
event runs every function registered for it; when a function raises,
the run is redelivered under the same run id until ``max_attempts`` is
reached, so completed steps replay from the step cache.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger

from ..utils.error_handler import PipelineError
from .steps import InMemoryStepCache, StepCache, StepRunner

PipelineFunction = Callable[[Any, StepRunner], Awaitable[Any]]


@dataclass(frozen=True)
class RegisteredFunction:
    """A pipeline function bound to the event that triggers it."""

    function_id: str
    event_name: str
    handler: PipelineFunction
    parse_event: Callable[[Any], Any] | None = None


class TaskRunner:
    """Dispatch events to registered pipeline functions.

    Parameters
    ----------
    max_attempts: int
        Total deliveries per run, including the first one.
    retry_delay: float
        Seconds to wait between deliveries.
    cache: StepCache, optional
        Where completed step results are memoized.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 0.0,
        cache: StepCache | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.cache: StepCache = cache if cache is not None else InMemoryStepCache()
        self._functions: dict[str, list[RegisteredFunction]] = {}
        self._background: set[asyncio.Task[Any]] = set()

    def register(
        self,
        function_id: str,
        event_name: str,
        handler: PipelineFunction,
        parse_event: Callable[[Any], Any] | None = None,
    ) -> RegisteredFunction:
        """Register ``handler`` to run whenever ``event_name`` is sent.

        ``parse_event`` converts the raw payload (for example a
        pydantic ``model_validate``) before the handler sees it.
        """
        function = RegisteredFunction(function_id, event_name, handler, parse_event)
        self._functions.setdefault(event_name, []).append(function)
        logger.debug("Registered function {} for event {}", function_id, event_name)
        return function

    def functions_for(self, event_name: str) -> list[RegisteredFunction]:
        return list(self._functions.get(event_name, []))

    async def invoke(self, event_name: str, data: Any, run_id: str | None = None) -> Any:
        """Run the single function registered for ``event_name`` and return its result."""
        functions = self.functions_for(event_name)
        if len(functions) != 1:
            raise LookupError(
                f"Expected exactly one function for {event_name}, found {len(functions)}"
            )
        return await self._deliver(functions[0], data, run_id or str(uuid.uuid4()))

    async def send(self, event_name: str, data: Any) -> list[Any]:
        """Run every function registered for ``event_name``.

        Each function gets its own run id.  Results are returned in
        registration order.
        """
        functions = self.functions_for(event_name)
        if not functions:
            logger.warning("No functions registered for event {}", event_name)
            return []
        return list(
            await asyncio.gather(
                *(self._deliver(function, data, str(uuid.uuid4())) for function in functions)
            )
        )

    def send_background(self, event_name: str, data: Any) -> asyncio.Task[Any]:
        """Schedule :meth:`send` on the running loop without awaiting it."""
        task = asyncio.create_task(self._send_logged(event_name, data))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def drain(self) -> None:
        """Wait for all background deliveries to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _send_logged(self, event_name: str, data: Any) -> list[Any]:
        try:
            return await self.send(event_name, data)
        except Exception:
            logger.exception("Background delivery of {} failed", event_name)
            return []

    async def _deliver(self, function: RegisteredFunction, data: Any, run_id: str) -> Any:
        event = function.parse_event(data) if function.parse_event else data
        log = logger.bind(function=function.function_id, run_id=run_id)
        attempt = 0
        while True:
            attempt += 1
            step = StepRunner(run_id, self.cache)
            try:
                result = await function.handler(event, step)
            except Exception as exc:
                log.warning(
                    "Attempt {}/{} of {} failed: {}",
                    attempt,
                    self.max_attempts,
                    function.function_id,
                    exc,
                )
                if attempt >= self.max_attempts:
                    self.cache.clear(run_id)
                    raise PipelineError(function.function_id, run_id, attempt) from exc
                if self.retry_delay:
                    await asyncio.sleep(self.retry_delay)
                continue
            self.cache.clear(run_id)
            log.debug("Function {} completed on attempt {}", function.function_id, attempt)
            return result
