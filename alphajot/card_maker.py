"""
Card creation and confirmation.

Create runs the art and message pipelines side by side and renders the card
page. The two pipelines fail differently on purpose:

- art always degrades: a failed brief falls back to a canned prompt and a
  failed image falls back to the placeholder artwork;
- message propagates: there is no canned greeting, so a failed completion
  fails the whole create request (rendered by the app as the failure page).

Confirm carries no server state. The image URL and message come back from the
hidden fields of the card page exactly as they were shown.
"""
from flask import current_app, request, send_from_directory
from openai import OpenAI

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional
import logging

from .card_mailer import CardMailer, dispatch_card_email
from .card_page import ATTRIBUTION, format_result, format_to_html
from .card_prompts import CardRequest, art_meta_prompt, fallback_brief, image_prompt, message_prompt
from .completion import complete, generate_image, make_client
from .email_check import is_valid_email
from .image_store import ImageStore
from .settings import CardSettings

logger = logging.getLogger("card_maker")

SUCCESS_PAGE = "success.html"
FAILURE_PAGE = "failure.html"


class MessageGenerationError(Exception):
    """The greeting text could not be generated."""


@dataclass(frozen=True)
class StepResult:
    """Outcome of one pipeline: the value plus whether a fallback was used."""
    value: Optional[str] = None
    error: Optional[BaseException] = None
    fell_back: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CardResult:
    image_url: str
    message_html: str


@dataclass(frozen=True)
class ConfirmRequest:
    email: str
    image_url: str
    message_html: str

    @classmethod
    def from_form(cls, form) -> "ConfirmRequest":
        return cls(
            email=str(form.get("email") or "").lower(),
            image_url=str(form.get("img") or ""),
            message_html=str(form.get("msg") or ""),
        )


@dataclass
class CardServices:
    """Collaborators built once at startup and shared by every request."""
    settings: CardSettings
    client: Optional[OpenAI]
    store: ImageStore
    mailer: CardMailer
    mail_executor: ThreadPoolExecutor

    @classmethod
    def from_settings(cls, settings: CardSettings) -> "CardServices":
        client = make_client(settings)
        return cls(
            settings=settings,
            client=client,
            store=ImageStore.from_settings(settings),
            mailer=CardMailer(client, settings),
            mail_executor=ThreadPoolExecutor(max_workers=settings.mail_workers, thread_name_prefix="card-mail"),
        )


def finalize_art(client, settings, theme: str) -> StepResult:
    """Brief from the completion model, then one image. Never raises."""
    fell_back = False
    try:
        brief = complete(client, settings, art_meta_prompt(theme), temperature=0.7, max_tokens=100)
    except Exception as e:
        logger.warning("Art brief failed for theme %r, using fallback: %s", theme, e)
        brief = fallback_brief(theme)
        fell_back = True

    prompt = image_prompt(brief, theme)
    logger.info("IMAGE PROMPT: %s", prompt)

    try:
        return StepResult(value=generate_image(client, settings, prompt), fell_back=fell_back)
    except Exception as e:
        logger.warning("AI image generation error, using placeholder: %s", e)
        return StepResult(value=settings.placeholder_image_url, error=e, fell_back=True)


def finalize_message(client, settings, theme_text: str, recipient: str, sender: str) -> StepResult:
    prompt = message_prompt(theme_text, recipient, sender)
    logger.info("PROMPT: %s", prompt)
    try:
        message = complete(client, settings, prompt, temperature=0.7, max_tokens=100)
    except Exception as e:
        return StepResult(error=e)
    return StepResult(value=message.lstrip("\n"))


def _art_outcome(result: StepResult, settings) -> str:
    # Art degrades: any result without a URL becomes the placeholder.
    return result.value or settings.placeholder_image_url


def _message_outcome(result: StepResult) -> str:
    # Message propagates.
    if not result.ok:
        raise MessageGenerationError(str(result.error)) from result.error
    return result.value or ""


def log_card_request(card: CardRequest):
    logger.info(
        "---NEW CARD REQUEST--- ART THEME: %s | MESSAGE THEME: %s | ANONYMOUS?: %s",
        card.art_theme,
        card.message_theme,
        card.anonymous,
    )


def log_card_result(result: CardResult):
    logger.info(
        "---CARD CREATED--- ART LINK: %s\nMESSAGE TEXT:\n%s\n\n%s",
        result.image_url,
        result.message_html,
        ATTRIBUTION,
    )


def make_card(services: CardServices, card: CardRequest) -> CardResult:
    """Run both pipelines concurrently and wait for both."""
    client, settings = services.client, services.settings
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="card-make") as pool:
        art_fut = pool.submit(finalize_art, client, settings, card.art_theme)
        msg_fut = pool.submit(
            finalize_message, client, settings, card.message_theme, card.recipient, card.sender
        )
        art, message = art_fut.result(), msg_fut.result()

    result = CardResult(
        image_url=_art_outcome(art, settings),
        message_html=format_to_html(_message_outcome(message)),
    )
    log_card_result(result)
    return result


def get_services() -> CardServices:
    return current_app.extensions["alphajot"]


def _static_page(name: str):
    return send_from_directory(current_app.static_folder, name)


def create_card():
    """POST /CreateCard - generate a card and return its page."""
    card = CardRequest.from_form(request.form)
    log_card_request(card)
    result = make_card(get_services(), card)
    return format_result(result.image_url, result.message_html)


def confirm_card():
    """POST /ConfirmCard - host the image, email the card, return success/failure page."""
    services = get_services()
    confirm = ConfirmRequest.from_form(request.form)

    if not is_valid_email(confirm.email):
        logger.info("Rejected card confirmation for invalid address %r", confirm.email)
        return _static_page(FAILURE_PAGE)

    logger.info("REQUESTED SEND TO: %s", confirm.email)
    try:
        hosted_url = services.store.save(confirm.image_url)
        dispatch_card_email(
            services.mail_executor, services.mailer, confirm.email, hosted_url, confirm.message_html
        )
    except Exception:
        logger.exception("Card confirmation failed for %s", confirm.email)
        return _static_page(FAILURE_PAGE)

    return _static_page(SUCCESS_PAGE)
