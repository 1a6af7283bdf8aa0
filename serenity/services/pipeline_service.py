"""Wiring of the task runner, the pipeline functions and the model client."""

from __future__ import annotations

from functools import lru_cache

from ..config.app_config import AppConfig, get_app_config
from ..pipeline.functions import TherapyPipeline
from ..pipeline.runner import TaskRunner
from .llm_service import GenerativeModel, GenerativeModelClient


def build_task_runner(model: GenerativeModel, app_config: AppConfig | None = None) -> TaskRunner:
    """Return a task runner with every therapy function registered."""
    app_config = app_config or get_app_config()
    runner = TaskRunner(
        max_attempts=app_config.pipeline_max_attempts,
        retry_delay=app_config.pipeline_retry_delay,
    )
    return TherapyPipeline(model).register(runner)


@lru_cache()
def get_task_runner() -> TaskRunner:
    """Return the process-wide task runner backed by the configured model."""
    return build_task_runner(GenerativeModelClient())
