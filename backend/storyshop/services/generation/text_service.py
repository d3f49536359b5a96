"""
文本生成服务
单轮生成、多轮对话和文本续写
"""

from typing import List, Optional

from storyshop.core.ai.models import ChatTurn
from storyshop.core.ai.providers.base.chat import BaseChatProvider
from storyshop.core.ai.retry import BackoffExecutor
from storyshop.prompts import PromptManager, get_prompt_manager
from storyshop.schemas.generation import ChatMessage, CompletionResult, TextGenerationResult
from storyshop.services.generation.exceptions import InvalidInputError


class TextGenerationService:
    """文本生成服务，模型调用统一经过限流重试"""

    def __init__(
        self,
        chat_provider: BaseChatProvider,
        executor: Optional[BackoffExecutor] = None,
        prompts: Optional[PromptManager] = None
    ):
        self.chat_provider = chat_provider
        self.executor = executor or BackoffExecutor()
        self.prompts = prompts or get_prompt_manager()

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> TextGenerationResult:
        if not prompt or not prompt.strip():
            raise InvalidInputError("Prompt is required")

        text = await self.executor.run(
            lambda: self.chat_provider.generate_text(
                prompt,
                model=model,
                temperature=temperature,
                max_output_tokens=max_output_tokens
            )
        )
        return TextGenerationResult(text=text, model=self.chat_provider.resolve_model(model))

    async def chat(
        self,
        message: str,
        history: Optional[List[ChatMessage]] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> TextGenerationResult:
        if not message or not message.strip():
            raise InvalidInputError("Message is required")

        turns = [ChatTurn(role=item.role, content=item.content) for item in history or []]
        text = await self.executor.run(
            lambda: self.chat_provider.chat(
                message,
                turns,
                model=model,
                temperature=temperature,
                max_output_tokens=max_output_tokens
            )
        )
        return TextGenerationResult(text=text, model=self.chat_provider.resolve_model(model))

    async def complete(self, text: str, model: Optional[str] = None) -> CompletionResult:
        """续写一段文本"""
        if not text or not text.strip():
            raise InvalidInputError("Text is required")

        prompt = self.prompts.render_user_prompt("text", "completion", text=text)
        result = await self.generate_text(prompt, model=model)
        return CompletionResult(original=text, completion=result.text)
