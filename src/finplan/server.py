"""Flask webhook for Twilio WhatsApp messages."""

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request, send_from_directory

from finplan import config
from finplan.bot import handle_message
from finplan.formulas import list_formulas
from finplan.messaging import TwilioMessenger

logger = logging.getLogger(__name__)


def create_app(messenger: Optional[Any] = None) -> Flask:
    """Build the app; ``messenger`` defaults to a TwilioMessenger from config."""
    app = Flask(__name__)
    app.config["MESSENGER"] = messenger or TwilioMessenger()
    app.config["MEDIA_DIR"] = config.MEDIA_DIR.resolve()

    @app.post("/whatsapp")
    def whatsapp_webhook():
        incoming_msg = request.form.get("Body", "")
        sender = request.form.get("From", "")
        logger.info(f"[+] Mensaje recibido de {sender}: \"{incoming_msg}\"")
        handle_message(incoming_msg, sender, app.config["MESSENGER"])
        return "Message received", 200

    @app.get("/media/<path:filename>")
    def media(filename: str):
        return send_from_directory(app.config["MEDIA_DIR"], filename, mimetype="image/png")

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "formulas": len(list_formulas())})

    return app
