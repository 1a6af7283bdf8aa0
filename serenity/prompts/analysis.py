"""Prompt asking the model to classify a single chat message."""

from langchain_core.prompts import PromptTemplate

MESSAGE_ANALYSIS_PROMPT = PromptTemplate.from_template(
    "Analyze this therapy message and provide insights. "
    "Return ONLY a valid JSON object with no markdown formatting.\n"
    "Message: {message}\n"
    "Context: {context}\n"
    "\n"
    "Required JSON:\n"
    "{{\n"
    '  "emotionalState": "string",\n'
    '  "themes": ["string"],\n'
    '  "riskLevel": number,\n'
    '  "recommendedApproach": "string",\n'
    '  "progressIndicators": ["string"]\n'
    "}}"
)
