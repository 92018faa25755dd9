"""Tests for card email composition and dispatch."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from alphajot.card_mailer import (
    DEFAULT_SUBJECT,
    CardMailer,
    build_email_html,
    build_email_text,
    dispatch_card_email,
    generate_subject,
)
from alphajot.card_page import ATTRIBUTION
from conftest import FakeOpenAI, FakeMailer


class FakeSMTP:
    def __init__(self, fail=False):
        self.fail = fail
        self.logins = []
        self.sent = []
        self.quit_called = False

    def login(self, user, password):
        self.logins.append((user, password))

    def sendmail(self, from_addr, to_addrs, msg):
        if self.fail:
            raise OSError("relay refused")
        self.sent.append((from_addr, to_addrs, msg))

    def quit(self):
        self.quit_called = True


class TestSubject:
    def test_generated_subject_is_trimmed(self, settings):
        client = FakeOpenAI(chat=lambda prompt: '\n "Season\'s Greetings" \n')
        assert generate_subject(client, settings, "<p>Hi</p>") == "Season's Greetings"
        call = client.chat.completions.calls[0]
        assert call["temperature"] == 0.5
        assert call["max_tokens"] == 20

    def test_failure_falls_back(self, settings):
        def boom(prompt):
            raise RuntimeError("down")

        assert generate_subject(FakeOpenAI(chat=boom), settings, "Hi") == DEFAULT_SUBJECT

    def test_empty_falls_back(self, settings):
        assert generate_subject(FakeOpenAI(chat=lambda p: "  \n"), settings, "Hi") == DEFAULT_SUBJECT


class TestBody:
    def test_html_embeds_image_and_message(self):
        html = build_email_html("https://ik.test/a.png", "Joy<p></p>Peace")
        assert 'src="https://ik.test/a.png"' in html
        assert "<p>Joy<p></p>Peace</p>" in html
        assert ATTRIBUTION in html
        assert "border-radius: 10px" in html

    def test_plain_text_alternative(self):
        assert build_email_text("<p>Joy</p><p>Peace</p>") == f"Joy\n\nPeace\n\n{ATTRIBUTION}"


class TestCardMailer:
    def test_send_logs_in_and_relays(self, settings):
        settings = replace(settings, email_user="hello@alphajot.com", email_password="pw")
        smtp = FakeSMTP()
        mailer = CardMailer(FakeOpenAI(), settings, smtp_factory=lambda: smtp)

        subject = mailer.send("ann@example.com", "https://ik.test/a.png", "<p>Hi</p>")

        assert subject == "Warm Wishes"
        assert smtp.logins == [("hello@alphajot.com", "pw")]
        from_addr, to_addrs, raw = smtp.sent[0]
        assert from_addr == settings.mail_from
        assert to_addrs == ["ann@example.com"]
        assert "Subject: Warm Wishes" in raw
        assert "To: ann@example.com" in raw
        assert smtp.quit_called

    def test_skips_login_without_credentials(self, settings):
        smtp = FakeSMTP()
        CardMailer(FakeOpenAI(), settings, smtp_factory=lambda: smtp).send("a@b.co", "u", "m")
        assert smtp.logins == []

    def test_transport_error_raises_and_closes(self, settings):
        smtp = FakeSMTP(fail=True)
        mailer = CardMailer(FakeOpenAI(), settings, smtp_factory=lambda: smtp)
        with pytest.raises(OSError):
            mailer.send("a@b.co", "u", "m")
        assert smtp.quit_called


class TestDispatch:
    def test_success_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="card_mailer")
        mailer = FakeMailer()
        executor = ThreadPoolExecutor(max_workers=1)

        fut = dispatch_card_email(executor, mailer, "a@b.co", "u", "m")
        executor.shutdown(wait=True)

        assert fut.result() == "Warm Wishes"
        assert mailer.sent == [("a@b.co", "u", "m")]
        assert "Email sent successfully to a@b.co" in caplog.text

    def test_failure_is_logged_not_raised(self, caplog):
        caplog.set_level(logging.INFO, logger="card_mailer")

        class BrokenMailer:
            def send(self, *args):
                raise ConnectionError("relay down")

        executor = ThreadPoolExecutor(max_workers=1)
        fut = dispatch_card_email(executor, BrokenMailer(), "a@b.co", "u", "m")
        executor.shutdown(wait=True)

        assert isinstance(fut.exception(), ConnectionError)
        assert "Email to a@b.co failed" in caplog.text
