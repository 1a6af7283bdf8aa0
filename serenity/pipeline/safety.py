"""Safety-check step.

A high risk level is reported through a WARNING log record only.
Escalation to a human is left to whatever consumes the logs; the
pipeline result carries no alert flag.
"""

from __future__ import annotations

from loguru import logger

from ..models.analysis import AnalysisResult

RISK_ALERT_THRESHOLD = 4


def requires_risk_alert(analysis: AnalysisResult) -> bool:
    return analysis.risk_level is not None and analysis.risk_level > RISK_ALERT_THRESHOLD


def trigger_risk_alert(message: str, analysis: AnalysisResult) -> None:
    logger.bind(message=message, risk_level=analysis.risk_level).warning(
        "High risk level detected"
    )
