"""Structured results produced by the model-backed analysis steps."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .base import CamelModel


class AnalysisResult(CamelModel):
    """Emotional and risk classification of a single chat message.

    Every field is optional because the model may omit some of them;
    the memory-update step skips absent fields.  Unknown keys returned
    by the model are preserved so a parsed analysis round-trips
    unchanged.
    """

    model_config = ConfigDict(extra="allow")

    emotional_state: str | None = None
    themes: list[str] | None = None
    risk_level: int | float | None = None
    recommended_approach: str | None = None
    progress_indicators: list[str] | None = None


def neutral_analysis() -> AnalysisResult:
    """Return the fixed analysis used whenever classification fails."""
    return AnalysisResult(
        emotional_state="neutral",
        themes=[],
        risk_level=0,
        recommended_approach="supportive",
        progress_indicators=[],
    )


class SessionAnalysis(CamelModel):
    """Insights extracted from a completed therapy session transcript."""

    model_config = ConfigDict(extra="allow")

    themes: list[str] = Field(default_factory=list)
    emotional_state: Any = None
    areas_of_concern: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    progress_indicators: list[str] = Field(default_factory=list)


class ActivityRecommendation(CamelModel):
    """A single personalised activity suggestion."""

    model_config = ConfigDict(extra="allow")

    name: str
    reasoning: str | None = None
    expected_benefits: list[str] | str | None = None
    difficulty: str | None = None
    duration_minutes: int | None = None


class ActivityRecommendations(CamelModel):
    """Recommendations generated from a user's mood and activity history."""

    model_config = ConfigDict(extra="allow")

    recommendations: list[ActivityRecommendation] = Field(default_factory=list)
