"""WhatsApp transport through the Twilio Messages REST API."""

import logging
import uuid
from pathlib import Path
from typing import Dict, Optional

import requests

from finplan import config

logger = logging.getLogger(__name__)


class TwilioMessenger:
    """
    Sends WhatsApp text and images through Twilio.

    Twilio fetches media by URL, so images are written to ``media_dir`` and
    announced as ``<public_base_url>/media/<file>``; the web app serves them.
    Send failures are logged and reported as ``False``.
    """

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        media_dir: Optional[Path] = None,
        public_base_url: Optional[str] = None,
    ) -> None:
        self.account_sid = account_sid or config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or config.TWILIO_AUTH_TOKEN
        self.from_number = from_number or config.TWILIO_PHONE_NUMBER
        self.media_dir = Path(media_dir or config.MEDIA_DIR)
        self.public_base_url = (public_base_url or config.PUBLIC_BASE_URL).rstrip("/")

    @property
    def messages_url(self) -> str:
        return f"{config.TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"

    def _post(self, data: Dict[str, str]) -> bool:
        try:
            response = requests.post(
                self.messages_url,
                data=data,
                auth=(self.account_sid, self.auth_token),
                timeout=config.TWILIO_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Twilio send to {data.get('To')} failed: {e}")
            return False
        return True

    def send_text(self, text: str, to: str) -> bool:
        return self._post({"From": self.from_number, "To": to, "Body": text})

    def save_media(self, image_bytes: bytes) -> str:
        """Store PNG bytes under the media dir and return the file name."""
        self.media_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4().hex}.png"
        (self.media_dir / filename).write_bytes(image_bytes)
        return filename

    def send_image(self, image_bytes: bytes, to: str) -> bool:
        try:
            filename = self.save_media(image_bytes)
        except OSError as e:
            logger.error(f"Could not store media for {to}: {e}", exc_info=True)
            return False
        media_url = f"{self.public_base_url}/media/{filename}"
        logger.info(f"Sending image {media_url} to {to}")
        return self._post({"From": self.from_number, "To": to, "MediaUrl": media_url})
