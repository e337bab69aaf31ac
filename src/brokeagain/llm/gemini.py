"""Gemini client wrapper shared by the LLM collaborators."""
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from brokeagain.utils.exceptions import LLMError, RetryableLLMError, RetryableNetworkError


def create_client(api_key: str) -> genai.Client:
    """Build a Gemini client for the collaborators."""
    return genai.Client(api_key=api_key)


def generate_text(client: genai.Client, model: str, contents: Any, max_output_tokens: int) -> str:
    """
    Run one generate_content call and return its text.

    Raises:
        RetryableLLMError: rate limit or server-side API error
        RetryableNetworkError: connection dropped or timed out
        LLMError: any other API error
    """
    try:
        response = client.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(max_output_tokens=max_output_tokens)
        )
    except genai_errors.APIError as e:
        if e.code == 429 or (e.code or 0) >= 500:
            raise RetryableLLMError(f"Gemini API error {e.code}: {e.message}") from e
        raise LLMError(f"Gemini API error {e.code}: {e.message}") from e
    except (ConnectionError, TimeoutError) as e:
        raise RetryableNetworkError(f"Gemini connection failed: {e}") from e

    return response.text or ""
