import time

import litellm
import structlog

from posbakum.core.core import Service
from posbakum.core.modules.assistant.models import ChatTurn
from posbakum.core.modules.assistant.prompts import EMPTY_REPLY, UNAVAILABLE_REPLY, build_messages
from posbakum.errors import ValidationError

logger = structlog.get_logger(__name__)


class AssistantService(Service):
    """Stateless proxy to the chat model answering questions about services and requirements."""

    async def chat(self, message: str, history: list[ChatTurn]) -> str:
        """Reply to `message` given the earlier conversation. Model failures yield a fixed apology."""
        message = message.strip()
        if not message:
            raise ValidationError("Message cannot be empty")

        if not self.core.config.llm_api_key:
            logger.warning("assistant_not_configured")
            return UNAVAILABLE_REPLY

        start_time = time.time()
        try:
            response = await litellm.acompletion(
                model=self.core.config.llm_model,
                messages=build_messages(message, [(turn.role, turn.text) for turn in history]),
                api_key=self.core.config.llm_api_key,
            )
        except Exception as e:
            logger.exception("assistant_request_failed", model=self.core.config.llm_model, error=str(e))
            return UNAVAILABLE_REPLY

        duration_ms = int((time.time() - start_time) * 1000)
        content = response.choices[0].message.content
        logger.debug("assistant_replied", model=self.core.config.llm_model, duration_ms=duration_ms, history=len(history))
        return content or EMPTY_REPLY
