import logging

import requests
from flask import current_app

log = logging.getLogger(__name__)


def is_configured() -> bool:
    return bool(
        current_app.config.get("WHATSAPP_API_KEY")
        and current_app.config.get("WHATSAPP_PHONE_NUMBER_ID")
    )


def send_text(to: str, message: str):
    """Send a WhatsApp text. Returns (ok, error) and never raises."""
    if not to:
        return False, "No recipient"

    if not is_configured() or current_app.config.get("WHATSAPP_TEST_MODE", True):
        log.info("[WA stub] Would send to %s: %s", to, message)
        return True, None

    base = current_app.config.get("WHATSAPP_API_BASE", "https://graph.facebook.com/v20.0").rstrip("/")
    url = f"{base}/{current_app.config['WHATSAPP_PHONE_NUMBER_ID']}/messages"
    payload = {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {"body": message},
    }

    try:
        resp = requests.post(
            url,
            headers={
                "Authorization": f"Bearer {current_app.config['WHATSAPP_API_KEY']}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=current_app.config.get("WHATSAPP_TIMEOUT_SECONDS", 10),
        )
        resp.raise_for_status()
        return True, None
    except requests.RequestException as exc:
        log.warning("WhatsApp send to %s failed: %s", to, exc)
        return False, str(exc)
