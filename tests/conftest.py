from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest

from alphajot.app import create_app
from alphajot.card_maker import CardServices
from alphajot.settings import CardSettings

GENERATED_IMAGE = "https://images.example.test/generated/abc123.png"
HOSTED_IMAGE = "https://ik.imagekit.io/alphajot/hosted.png"
GREETING = "Wishing you a season full of warmth and cocoa."
BRIEF = "A snowy village at dusk with glowing windows"


def default_chat(prompt: str) -> str:
    if prompt.startswith("Write brief, unique text"):
        return "\n\n" + GREETING
    if prompt.startswith("Write a short subject line"):
        return " Warm Wishes "
    return BRIEF


def default_image(prompt: str) -> str:
    return GENERATED_IMAGE


class FakeCompletions:
    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        text = self.responder(kwargs["messages"][-1]["content"])
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])

    @property
    def prompts(self):
        return [c["messages"][-1]["content"] for c in self.calls]


class FakeImages:
    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    def generate(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(url=self.responder(kwargs["prompt"]))])


class FakeOpenAI:
    """Stands in for openai.OpenAI: chat.completions.create and images.generate."""

    def __init__(self, chat=default_chat, image=default_image):
        self.chat = SimpleNamespace(completions=FakeCompletions(chat))
        self.images = FakeImages(image)


class FakeStore:
    def __init__(self, error=None):
        self.error = error
        self.saved = []

    def save(self, source_url):
        self.saved.append(source_url)
        if self.error:
            raise self.error
        return HOSTED_IMAGE


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, email, image_url, message_html):
        self.sent.append((email, image_url, message_html))
        return "Warm Wishes"


@pytest.fixture
def settings():
    return CardSettings()


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def services(settings, fake_openai):
    svc = CardServices(
        settings=settings,
        client=fake_openai,
        store=FakeStore(),
        mailer=FakeMailer(),
        mail_executor=ThreadPoolExecutor(max_workers=1),
    )
    yield svc
    svc.mail_executor.shutdown(wait=True)


@pytest.fixture
def client(services):
    app = create_app(services=services)
    app.config["TESTING"] = True
    return app.test_client()
