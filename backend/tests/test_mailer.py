import json

import httpx
import pytest

from surveydesk.core.config import Settings
from surveydesk.core.errors import MailDeliveryError
from surveydesk.services.mailer import ConsoleMailer, HttpMailer, build_mailer

def test_http_mailer_posts_code():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(202, json={"id": "m1"})

    mailer = HttpMailer("https://mail.test/send", "key", "from@x.io", transport=httpx.MockTransport(handler))
    mailer.send_code("to@x.io", "123456")

    assert len(seen) == 1
    assert seen[0].headers["authorization"] == "Bearer key"
    body = json.loads(seen[0].content)
    assert body["to"] == ["to@x.io"]
    assert "123456" in body["text"]

def test_http_mailer_failure_is_reported():
    mailer = HttpMailer("https://mail.test/send", None, "from@x.io", transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    with pytest.raises(MailDeliveryError):
        mailer.send_code("to@x.io", "123456")

def test_build_mailer_selects_backend():
    assert isinstance(build_mailer(Settings(mail_backend="console")), ConsoleMailer)
    assert isinstance(build_mailer(Settings(mail_backend="http", mail_api_url="https://mail.test")), HttpMailer)
    with pytest.raises(ValueError):
        build_mailer(Settings(mail_backend="http", mail_api_url=None))
