"""Prompt for personalised activity recommendations."""

from langchain_core.prompts import PromptTemplate

ACTIVITY_RECOMMENDATIONS_PROMPT = PromptTemplate.from_template(
    "Based on the following user context, generate personalized activity recommendations:\n"
    "User Context: {context}\n"
    "\n"
    "Return ONLY a valid JSON object with no markdown formatting of the form\n"
    '{{"recommendations": [{{"name": "string", "reasoning": "string", '
    '"expectedBenefits": ["string"], "difficulty": "easy|medium|hard", '
    '"durationMinutes": number}}]}}\n'
    "Provide 3-5 recommendations."
)
