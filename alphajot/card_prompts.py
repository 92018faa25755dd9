"""
Prompt construction for the card pipelines, plus the form parsing that feeds it.
"""
from dataclasses import dataclass
import re

DEFAULT_ART_THEME = "traditional christmas scene"
DEFAULT_RECIPIENT = "all the sender's friends"

ART_META_PROMPTS = {
    "christmas": "Write a brief idea for some Christmas card art, possibly including Santa Claus, Christmas trees, or reindeer:",
    "winterlandscape": "Write a brief idea for a beautiful winter landscape painting:",
    "fineart": "Write a brief idea for a beautiful example of fine art painting:",
    "nativity": "Write a brief idea for an image depiction of the nativity scene and its medium:",
}
GENERIC_ART_META_PROMPT = "Write an brief idea for an image, described as: "

# Keyed on the art theme as submitted. "fine art" only matches free text; the
# "fineart" radio key falls through to the generic suffix.
ART_PROMPT_SUFFIXES = {
    "christmas": ", christmas card art",
    "winterlandscape": ", detailed painting",
    "fine art": ", fine art painting",
    "nativity": "",
}

_PARAGRAPH_TAG_RE = re.compile(r"</?p>")


def art_meta_prompt(theme: str) -> str:
    """Meta-prompt asking the completion model for a short art brief."""
    if theme in ART_META_PROMPTS:
        return ART_META_PROMPTS[theme]
    return GENERIC_ART_META_PROMPT + theme


def fallback_brief(theme: str) -> str:
    return theme + ", a detailed painting"


def image_prompt(brief: str, theme: str) -> str:
    """Final image-generation prompt: the brief plus a theme suffix."""
    suffix = ART_PROMPT_SUFFIXES.get(theme)
    if suffix is None:
        suffix = ", " + theme
    return brief + suffix


def message_prompt(theme_text: str, recipient: str, sender: str) -> str:
    prompt = (
        f"Write brief, unique text for a Christmas greeting card to {recipient or DEFAULT_RECIPIENT}. "
        f"Details: should be \"{theme_text}\". "
    )
    if sender:
        prompt += f"Name of sender: {sender}."
    else:
        prompt += "From an anonymous sender."
    return prompt


def subject_prompt(message_html: str) -> str:
    text = _PARAGRAPH_TAG_RE.sub("\n", message_html or "")
    return f"Write a short subject line for an email with the following text: {text}. Subject: "


def _field(form, name: str) -> str:
    return str(form.get(name) or "")


def art_theme_from_form(form) -> str:
    return _field(form, "artprompt") or _field(form, "description") or DEFAULT_ART_THEME


def message_theme_from_form(form) -> str:
    theme = _field(form, "theme")
    extra = _field(form, "msgprompt")
    if extra:
        return f"{theme}, {extra}"
    return theme


def names_from_form(form) -> tuple[str, str]:
    """(recipient, sender); sender is blank when the anonymous box is ticked."""
    recipient = _field(form, "recipient") or DEFAULT_RECIPIENT
    sender = "" if _field(form, "anoncheck") == "on" else _field(form, "sender")
    return (recipient, sender)


@dataclass(frozen=True)
class CardRequest:
    art_theme: str
    message_theme: str
    recipient: str
    sender: str

    @property
    def anonymous(self) -> bool:
        return self.sender == ""

    @classmethod
    def from_form(cls, form) -> "CardRequest":
        recipient, sender = names_from_form(form)
        return cls(
            art_theme=art_theme_from_form(form),
            message_theme=message_theme_from_form(form),
            recipient=recipient,
            sender=sender,
        )
