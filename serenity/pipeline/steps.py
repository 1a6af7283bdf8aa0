"""Named, memoized units of work within one pipeline run.

A pipeline function receives a :class:`StepRunner` and wraps each unit
of work in ``await step.run("name", work)``.  Results are memoized by
``(run_id, step_name)`` in a :class:`StepCache`, so when the task runner
redelivers a failed run under the same run id, steps that already
completed return their stored result instead of executing again.  The
step runner never retries on its own; redelivery belongs to
:class:`~serenity.pipeline.runner.TaskRunner`.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Protocol, TypeVar, Union

from loguru import logger

T = TypeVar("T")

StepWork = Callable[[], Union[T, Awaitable[T]]]


class StepCache(Protocol):
    """Storage for completed step results keyed by run and step name."""

    def get(self, run_id: str, step_name: str) -> tuple[bool, Any]:
        """Return ``(found, value)`` for a step of a run."""
        ...

    def set(self, run_id: str, step_name: str, value: Any) -> None:
        ...

    def clear(self, run_id: str) -> None:
        ...


class InMemoryStepCache:
    """Process-local step cache.

    Runs for different events never share keys, so one cache can serve
    every concurrently executing run.
    """

    def __init__(self) -> None:
        self._results: dict[tuple[str, str], Any] = {}

    def get(self, run_id: str, step_name: str) -> tuple[bool, Any]:
        key = (run_id, step_name)
        if key in self._results:
            return True, self._results[key]
        return False, None

    def set(self, run_id: str, step_name: str, value: Any) -> None:
        self._results[(run_id, step_name)] = value

    def clear(self, run_id: str) -> None:
        for key in [key for key in self._results if key[0] == run_id]:
            del self._results[key]

    def __len__(self) -> int:
        return len(self._results)


class StepRunner:
    """Execute named steps at most once per pipeline run."""

    def __init__(self, run_id: str, cache: StepCache | None = None) -> None:
        self.run_id = run_id
        self._cache: StepCache = cache if cache is not None else InMemoryStepCache()
        self.executed: list[str] = []

    async def run(self, step_name: str, work: StepWork[T]) -> T:
        """Return the result of ``work``, executing it only on first use.

        ``work`` is a zero-argument callable returning either a value or
        an awaitable.  Exceptions raised by ``work`` propagate and
        nothing is memoized for the failed step.
        """
        found, value = self._cache.get(self.run_id, step_name)
        if found:
            logger.debug("Step {} replayed from cache (run {})", step_name, self.run_id)
            return value

        logger.debug("Running step {} (run {})", step_name, self.run_id)
        result = work()
        if inspect.isawaitable(result):
            result = await result
        self._cache.set(self.run_id, step_name, result)
        self.executed.append(step_name)
        return result
