# core/notifications.py
import requests

from core.config import settings
from core.logging_config import logger


# -----------------------------------------------------
# Toast relay
#
# Fire-and-forget: every outcome is logged, and posted to the
# console's webhook when one is configured. Delivery failures never
# reach the caller.
# -----------------------------------------------------
def send_webhook_message(payload: dict):
    webhook_url = settings.NOTIFY_WEBHOOK_URL
    if not webhook_url:
        logger.debug("Notify webhook not configured — skipping.")
        return

    try:
        response = requests.post(webhook_url, json=payload, timeout=5)
        logger.debug(f"Notification sent (status {response.status_code})")
    except requests.RequestException as e:
        logger.warning(f"Notification delivery failed: {e}")


def notify_success(title: str, description: str):
    logger.info(f"{title}: {description}")
    send_webhook_message({
        "title": title,
        "description": description,
        "variant": "default",
    })


def notify_error(title: str, description: str):
    logger.warning(f"{title}: {description}")
    send_webhook_message({
        "title": title,
        "description": description,
        "variant": "destructive",
    })
