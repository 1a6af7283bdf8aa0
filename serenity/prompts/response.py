"""Prompt for the therapeutic reply."""

from langchain_core.prompts import PromptTemplate

THERAPEUTIC_RESPONSE_PROMPT = PromptTemplate.from_template(
    "{system_prompt}\n"
    "\n"
    "Based on the following context, generate a therapeutic response:\n"
    "Message: {message}\n"
    "Analysis: {analysis}\n"
    "Memory: {memory}\n"
    "Goals: {goals}\n"
    "\n"
    "Response requirements:\n"
    "1. Be empathetic and supportive\n"
    "2. Address emotional needs\n"
    "3. Use therapeutic techniques\n"
    "4. Stay professional\n"
    "5. Ensure safety and grounding"
)
