"""Pipeline functions triggered by therapy and mood events.

Each function takes its event and a :class:`StepRunner` and expresses
its work as named steps.  ``process_chat_message`` never raises: its
steps carry their own fallbacks and an outer boundary fabricates a
complete result from the input memory.  The session-analysis and
recommendation functions re-raise so the task runner redelivers them.
"""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from ..models.analysis import (
    ActivityRecommendations,
    AnalysisResult,
    SessionAnalysis,
    neutral_analysis,
)
from ..models.events import (
    CHAT_MESSAGE_EVENT,
    MOOD_UPDATED_EVENT,
    SESSION_CREATED_EVENT,
    ChatMessageEvent,
    ChatPipelineResult,
    MoodUpdatedEvent,
    RecommendationResult,
    SessionAnalysisEvent,
    SessionAnalysisResult,
)
from ..models.memory import Memory
from ..prompts import ACTIVITY_RECOMMENDATIONS_PROMPT, SESSION_ANALYSIS_PROMPT
from ..services.llm_service import GenerativeModel
from ..utils.structured_output import parse_json_object
from ..utils.text_extraction import extract_text
from .analysis import analyze_message
from .memory import update_memory
from .response import FALLBACK_RESPONSE, generate_response
from .runner import TaskRunner
from .safety import requires_risk_alert, trigger_risk_alert
from .steps import StepRunner


class TherapyPipeline:
    """The model-backed functions behind chat, session and mood events."""

    def __init__(self, model: GenerativeModel) -> None:
        self.model = model

    def register(self, runner: TaskRunner) -> TaskRunner:
        """Register every function of this pipeline with ``runner``."""
        runner.register(
            "process-chat-message",
            CHAT_MESSAGE_EVENT,
            self.process_chat_message,
            ChatMessageEvent.model_validate,
        )
        runner.register(
            "analyze-therapy-session",
            SESSION_CREATED_EVENT,
            self.analyze_therapy_session,
            SessionAnalysisEvent.model_validate,
        )
        runner.register(
            "generate-activity-recommendations",
            MOOD_UPDATED_EVENT,
            self.generate_activity_recommendations,
            MoodUpdatedEvent.model_validate,
        )
        return runner

    async def process_chat_message(
        self, event: ChatMessageEvent, step: StepRunner
    ) -> ChatPipelineResult:
        """Analyse a message, update memory, maybe alert, then reply."""
        try:
            logger.info(
                "Processing chat message ({} characters, history length {})",
                len(event.message),
                len(event.history),
            )

            analysis: AnalysisResult = await step.run(
                "analyze-message",
                lambda: analyze_message(self.model, event.message, event.memory, event.goals),
            )

            updated_memory: Memory = await step.run(
                "update-memory",
                lambda: update_memory(event.memory, analysis),
            )

            if requires_risk_alert(analysis):
                await step.run(
                    "trigger-risk-alert",
                    lambda: trigger_risk_alert(event.message, analysis),
                )

            response: str = await step.run(
                "generate-response",
                lambda: generate_response(
                    self.model,
                    event.message,
                    analysis,
                    updated_memory,
                    event.goals,
                    event.system_prompt,
                ),
            )

            return ChatPipelineResult(
                response=response,
                analysis=analysis,
                updated_memory=updated_memory,
            )
        except Exception:
            logger.bind(message=event.message).exception("Error in overall processing")
            return ChatPipelineResult(
                response=FALLBACK_RESPONSE,
                analysis=neutral_analysis(),
                updated_memory=event.memory.model_copy(deep=True),
            )

    async def analyze_therapy_session(
        self, event: SessionAnalysisEvent, step: StepRunner
    ) -> SessionAnalysisResult:
        log = logger.bind(session_id=event.session_id)
        try:
            content = await step.run(
                "get-session-content",
                lambda: event.notes or event.transcript or "",
            )

            analysis: SessionAnalysis = await step.run(
                "analyze-session",
                lambda: self._analyze_session_content(content),
            )

            await step.run(
                "store-analysis",
                lambda: log.info("Session analysis stored successfully"),
            )

            if analysis.areas_of_concern:
                await step.run(
                    "trigger-concern-alert",
                    lambda: log.bind(concerns=analysis.areas_of_concern).warning(
                        "Concerning indicators detected in session analysis"
                    ),
                )

            return SessionAnalysisResult(message="Session analysis completed", analysis=analysis)
        except Exception:
            log.exception("Error in therapy session analysis")
            raise

    async def generate_activity_recommendations(
        self, event: MoodUpdatedEvent, step: StepRunner
    ) -> RecommendationResult:
        log = logger.bind(user_id=event.user_id)
        try:
            user_context: dict[str, Any] = await step.run(
                "get-user-context",
                lambda: {
                    "recentMoods": event.recent_moods,
                    "completedActivities": event.completed_activities,
                    "preferences": event.preferences,
                },
            )

            recommendations: ActivityRecommendations = await step.run(
                "generate-recommendations",
                lambda: self._recommend_activities(user_context),
            )

            await step.run(
                "store-recommendations",
                lambda: log.bind(count=len(recommendations.recommendations)).info(
                    "Activity recommendations stored successfully"
                ),
            )

            return RecommendationResult(
                message="Activity recommendations generated",
                recommendations=recommendations,
            )
        except Exception:
            log.exception("Error generating activity recommendations")
            raise

    async def _analyze_session_content(self, content: str) -> SessionAnalysis:
        result = await self.model.generate_content(SESSION_ANALYSIS_PROMPT.format(content=content))
        text = await extract_text(result, "session-analysis")
        return SessionAnalysis.model_validate(parse_json_object(text))

    async def _recommend_activities(self, user_context: dict[str, Any]) -> ActivityRecommendations:
        prompt = ACTIVITY_RECOMMENDATIONS_PROMPT.format(
            context=json.dumps(user_context, default=str)
        )
        result = await self.model.generate_content(prompt)
        text = await extract_text(result, "activity-recommendations")
        return ActivityRecommendations.model_validate(parse_json_object(text))
