"""Shared pydantic base class for wire-facing models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialised with camelCase keys and populated by either name.

    The HTTP clients and the event payloads use camelCase
    (``emotionalState``, ``sessionId``); Python code keeps snake_case
    attribute names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
