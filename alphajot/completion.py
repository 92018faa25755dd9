"""
Thin wrappers over the OpenAI SDK calls used by the card pipelines.
"""
from openai import OpenAI

from typing import Optional
import logging

logger = logging.getLogger("completion")

IMAGE_SIZE = "512x512"


class CompletionUnavailable(RuntimeError):
    """No OpenAI client is configured."""


def make_client(settings) -> Optional[OpenAI]:
    """OpenAI client, or None when OPENAI_API_KEY is unset so static pages still serve."""
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is not set; card generation will fail until it is configured")
        return None
    return OpenAI(api_key=settings.openai_api_key)


def _require(client):
    if client is None:
        raise CompletionUnavailable("OPENAI_API_KEY is not set")
    return client


def complete(client, settings, prompt: str, temperature: float = 0.7, max_tokens: int = 100) -> str:
    """Single-turn text completion; returns the raw generated text."""
    resp = _require(client).chat.completions.create(
        model=settings.completion_model,
        messages=[{"role": "user", "content": prompt}],
        temperature=temperature,
        max_tokens=max_tokens,
        top_p=1,
        frequency_penalty=0,
        presence_penalty=0,
    )
    return resp.choices[0].message.content or ""


def generate_image(client, settings, prompt: str) -> str:
    """Generate one image and return its (short-lived) URL."""
    resp = _require(client).images.generate(
        model=settings.image_model,
        prompt=prompt,
        n=1,
        size=IMAGE_SIZE,
    )
    url = resp.data[0].url
    if not url:
        raise ValueError("Image response has no url")
    return url
