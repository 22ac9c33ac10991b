"""
Prompt and request payload for This or That generation.
"""
from typing import Any, Dict

from langchain_core.prompts import PromptTemplate

from .categories import Category


THIS_OR_THAT_PROMPT = PromptTemplate.from_template(
"""Generate two distinct, highly creative, engaging, and **completely unique** "This or That" options for the category "{category}".
**Crucially, ensure that the two options use different primary keywords and concepts to avoid any repetition or similarity in wording, even if subtle.**
The options should be short phrases, be mutually exclusive, and present a clear dilemma.

Example for "Food & Drink":
- "Eat only bland food for life"
- "Eat only extremely spicy food for life"

Example for "Superpowers":
- "Ability to fly anywhere instantly"
- "Ability to control minds but only while sleeping"

Provide the response in a JSON array format with two strings, like:
["Option 1 Text", "Option 2 Text"]"""
)

# Gemini structured output: an array of exactly two strings
OPTION_PAIR_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {"type": "STRING"},
    "minItems": 2,
    "maxItems": 2,
}


def build_prompt(category: Category) -> str:
    return THIS_OR_THAT_PROMPT.format(category=category.value)


def build_generation_payload(category: Category, temperature: float) -> Dict[str, Any]:
    """
    Build the generateContent request body for a category.

    :param category: Category to generate options for
    :param temperature: Sampling temperature in [0.0, 1.0]
    :return: JSON-serializable request body
    """
    return {
        "contents": [
            {"role": "user", "parts": [{"text": build_prompt(category)}]},
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": OPTION_PAIR_SCHEMA,
            "temperature": temperature,
        },
    }
