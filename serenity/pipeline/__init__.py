"""Asynchronous multi-step pipeline behind every chat message."""

from .functions import TherapyPipeline  # noqa: F401
from .runner import TaskRunner  # noqa: F401
from .steps import InMemoryStepCache, StepRunner  # noqa: F401
