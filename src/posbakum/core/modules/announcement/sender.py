"""Announcement forwarding via the Telegram Bot API."""

import structlog
from telegram import Bot
from telegram.error import TelegramError

logger = structlog.get_logger(__name__)


async def send_telegram_message(token: str, chat_id: str, text: str) -> tuple[bool, str | None]:
    """Send a text message to Telegram.

    Returns:
        Tuple of (success: bool, error_message: str | None)
    """
    try:
        bot = Bot(token=token)
        await bot.send_message(chat_id=chat_id, text=text)
    except TelegramError as e:
        error_msg = str(e)
        logger.exception("telegram_send_failed", chat_id=chat_id, error=error_msg)
        return False, error_msg
    else:
        logger.debug("telegram_message_sent", chat_id=chat_id)
        return True, None
