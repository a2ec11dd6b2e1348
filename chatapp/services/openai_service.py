from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from chatapp.services.bot_service import BotReply, BotRequest


logger = logging.getLogger("chatapp.bot.openai")

SYSTEM_PROMPT = (
    "You are a friendly chat companion inside a messaging app. "
    "Answer briefly and conversationally."
)


class OpenAIBotProvider:
    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini", client: AsyncOpenAI | None = None) -> None:
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.default_model = default_model

    async def reply(self, request: BotRequest) -> BotReply:
        logger.info(
            "openai_request model=%s user_id=%s chars=%d",
            self.default_model,
            request.user_id,
            len(request.message),
        )

        try:
            completion = await self.client.chat.completions.create(
                model=self.default_model,
                temperature=0.7,
                max_tokens=300,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": request.message},
                ],
            )
        except OpenAIError:
            logger.error("openai_request_failed model=%s", self.default_model, exc_info=True)
            raise

        content = completion.choices[0].message.content or ""
        usage = completion.usage
        logger.info(
            "openai_response model=%s total_tokens=%s",
            self.default_model,
            usage.total_tokens if usage is not None else "unknown",
        )

        return BotReply(text=content, model=self.default_model)
