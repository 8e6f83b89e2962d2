"""Application entry point for the POSBAKUM queue server."""

import structlog

from posbakum.app import App
from posbakum.config import Config
from posbakum.logging import setup_logging
from posbakum.web.runner import run_server

logger = structlog.get_logger(__name__)


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    logger.info(
        "posbakum_starting",
        host=config.host,
        port=config.port,
        timezone=config.timezone,
        assistant_enabled=bool(config.llm_api_key),
        telegram_enabled=bool(config.telegram_bot_token and config.telegram_chat_id),
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()
