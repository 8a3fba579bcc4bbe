import logging
from typing import Any

import requests

from mindful_chat.errors import GenerationError
from mindful_chat.services.language import language_name

logger = logging.getLogger(__name__)

SYSTEM_CONTEXT = """You are an empathetic AI mental health assistant. Your purpose is to provide supportive,
compassionate responses to users who may be experiencing stress, anxiety, depression,
or other mental health challenges. Always respond with warmth and understanding.

Guidelines:
- Be supportive and non-judgmental
- Suggest healthy coping strategies when appropriate
- Recommend breathing exercises or mindfulness techniques when users seem stressed
- Recognize when to suggest professional help for serious concerns
- Never diagnose medical conditions or replace professional mental health care
- Maintain a calm, reassuring tone
- Keep responses concise and focused on the user's needs
- Respond in {language} language

Previous conversation context: {history}"""


def build_prompt(user_message: str, history_context: str = "", language: str = "en") -> str:
    system_context = SYSTEM_CONTEXT.format(
        language=language_name(language), history=history_context
    )
    return f"{system_context}\n\nUser: {user_message}\n\nResponse:"


def extract_candidate_text(data: Any) -> str:
    """
    Pull ``candidates[0].content.parts[0].text`` out of a generateContent
    response body.

    Raises:
        GenerationError: if the body has any other shape or the text is blank.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError("No response from Gemini API") from e
    if not isinstance(text, str) or not text.strip():
        raise GenerationError("Empty response from Gemini API")
    return text


class GeminiResponseGenerator:
    """Client for the Gemini ``generateContent`` REST endpoint.

    Every call is a single round trip. Failures are not retried; callers are
    expected to fall back to a canned reply instead.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 20.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY is not defined")
        self.api_key = api_key
        self.url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, user_message: str, history_context: str = "", language: str = "en") -> str:
        payload = {
            "contents": [
                {"parts": [{"text": build_prompt(user_message, history_context, language)}]}
            ]
        }

        try:
            resp = self.session.post(
                self.url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise GenerationError(f"Gemini API request failed: {e}") from e

        if not resp.ok:
            logger.error(f"Gemini API error {resp.status_code}: {resp.text[:500]}")
            raise GenerationError(f"Gemini API error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GenerationError("Gemini API returned a non-JSON body") from e

        return extract_candidate_text(data)
