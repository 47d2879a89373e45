import pytest

from finplan import config
from finplan.formulas import FORMULAS
from finplan.server import create_app


class FakeMessenger:
    def __init__(self):
        self.texts = []

    def send_text(self, text, to):
        self.texts.append((text, to))
        return True

    def send_image(self, image_bytes, to):
        return True


@pytest.fixture
def app_and_messenger(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "MEDIA_DIR", tmp_path)
    messenger = FakeMessenger()
    app = create_app(messenger)
    app.testing = True
    return app, messenger


def test_webhook_replies_to_menu(app_and_messenger) -> None:
    app, messenger = app_and_messenger
    resp = app.test_client().post("/whatsapp", data={"Body": "!menu", "From": "whatsapp:+51999999999"})
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "Message received"
    assert messenger.texts[0][1] == "whatsapp:+51999999999"


def test_webhook_ignores_plain_chat(app_and_messenger):
    app, messenger = app_and_messenger
    resp = app.test_client().post("/whatsapp", data={"Body": "hola", "From": "whatsapp:+1"})
    assert resp.status_code == 200
    assert messenger.texts == []


def test_media_is_served(app_and_messenger, tmp_path):
    app, _ = app_and_messenger
    (tmp_path / "abc.png").write_bytes(b"\x89PNG data")
    client = app.test_client()
    resp = client.get("/media/abc.png")
    assert resp.status_code == 200
    assert resp.data == b"\x89PNG data"
    assert client.get("/media/missing.png").status_code == 404


def test_health(app_and_messenger):
    app, _ = app_and_messenger
    resp = app.test_client().get("/health")
    assert resp.get_json() == {"status": "ok", "formulas": len(FORMULAS)}
