"""Prompt for analysing a completed therapy session."""

from langchain_core.prompts import PromptTemplate

SESSION_ANALYSIS_PROMPT = PromptTemplate.from_template(
    "Analyze this therapy session and provide insights:\n"
    "Session Content: {content}\n"
    "\n"
    "Return ONLY a valid JSON object with no markdown formatting and these keys:\n"
    '- "themes": key themes and topics discussed (array of strings)\n'
    '- "emotionalState": emotional state analysis (string)\n'
    '- "areasOfConcern": potential areas of concern (array of strings, empty if none)\n'
    '- "recommendations": recommendations for follow-up (array of strings)\n'
    '- "progressIndicators": progress indicators (array of strings)'
)
