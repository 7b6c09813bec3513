"""
Runtime settings for the dashboard.

Values come from environment variables so the same code runs locally and as
a Vercel function; ``init_app`` accepts a mapping that overrides them,
which is how the tests point the gateway at a fake session.
"""

import logging
import os
import secrets

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_BASE_URL = "https://web.breezway.com.br/webhook/"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def load_settings():
    """Read the settings from the environment."""
    return {
        "WEBHOOK_BASE_URL": os.environ.get("WEBHOOK_BASE_URL") or DEFAULT_WEBHOOK_BASE_URL,
        "WEBHOOK_TIMEOUT": float(os.environ.get("WEBHOOK_TIMEOUT") or 30),
        "SECRET_KEY": os.environ.get("SECRET_KEY") or None,
        "MAX_CONTENT_LENGTH": 16 * 1024 * 1024,  # 16 MB upload limit
        "LOG_LEVEL": (os.environ.get("LOG_LEVEL") or "INFO").upper(),
    }


def ensure_secret_key(config):
    """
    Make sure sessions can be signed, generating a key when none is set.

    A generated key only lives as long as the process.  On Vercel every cold
    start and every concurrent instance gets its own, so sessions signed by
    one are rejected by the next and users are logged out.  That is worth a
    warning everywhere except under ``TESTING``.

    :param config: Flask ``app.config`` (or any mutable mapping).
    :return: True when a configured key is in place, False when one was generated.
    """
    if config.get("SECRET_KEY"):
        return True
    config["SECRET_KEY"] = secrets.token_hex(32)
    if not config.get("TESTING"):
        logger.warning(
            "SECRET_KEY is not set; using a key for this process only. "
            "Sessions will not survive a restart or work across instances."
        )
    return False


def configure_logging(level="INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT)
