"""
prompts.py - Prompt building logic for text analysis

The oracle is asked for a single JSON object with the fields
``isCorrect``, ``improvedText``, ``summary`` and ``corrections``.
"""

import json
import textwrap
from typing import Dict, List

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "isCorrect": {
            "type": "boolean",
            "description": "True if the text has no spelling or grammar errors.",
        },
        "improvedText": {
            "type": "string",
            "description": "The complete corrected version of the text.",
        },
        "summary": {
            "type": "string",
            "description": "A short summary of the linguistic feedback.",
        },
        "corrections": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "originalText": {"type": "string"},
                    "suggestedText": {"type": "string"},
                    "reason": {"type": "string", "description": "Why this correction is suggested."},
                    "type": {"type": "string", "description": "spelling, grammar, or style"},
                },
                "required": ["originalText", "suggestedText", "reason", "type"],
            },
        },
    },
    "required": ["isCorrect", "improvedText", "summary", "corrections"],
}


class PromptBuilder:
    """Builds the chat messages for an analysis request."""

    def __init__(self, language: str = "Khmer"):
        self.language = language

    def system_prompt(self) -> str:
        return (
            f"You are a professional {self.language} linguist and editor. "
            f"Your goal is to help users write perfect {self.language}. "
            f"Identify errors accurately and provide helpful explanations "
            f"in the {self.language} language."
        )

    def build_analysis_prompt(self, text: str) -> List[Dict[str, str]]:
        """Compose the messages asking the model to analyze *text*.

        Args:
            text: The buffer to analyze

        Returns:
            List of message dictionaries for the LLM API
        """
        schema = json.dumps(RESPONSE_SCHEMA, indent=2)
        user = textwrap.dedent("""\
            Please analyze the following {language} text for spelling, grammar, and style errors.
            Provide a list of specific corrections and an overall improved version.

            Rules:
            - "originalText" must be copied exactly, character for character, from the text.
            - Keep each "originalText" as short as possible while still unambiguous.
            - "type" is one of: spelling, grammar, style.
            - Write "reason" and "summary" in {language}.

            Respond with ONLY a JSON object matching this schema:
            {schema}

            Text to analyze:
            <<<
            {text}
            >>>""").format(language=self.language, schema=schema, text=text)
        return [
            {"role": "system", "content": self.system_prompt()},
            {"role": "user", "content": user},
        ]
