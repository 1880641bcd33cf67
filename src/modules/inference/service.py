from collections.abc import AsyncIterator

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_huggingface import ChatHuggingFace, HuggingFaceEndpoint

from src.modules.inference.prompts import SUMMARY_SYSTEM_PROMPT


def build_chat_model(
    model: str, token: str, temperature: float = 0.3, max_tokens: int = 1024
) -> ChatHuggingFace:
    llm = HuggingFaceEndpoint(
        repo_id=model,
        huggingfacehub_api_token=token,
        provider="auto",
        task="text-generation",
        temperature=temperature,
        max_new_tokens=max_tokens,
    )
    return ChatHuggingFace(llm=llm)


class InferenceService:
    """Summary streaming and one-shot generation over LangChain chat models."""

    def __init__(self, summary_model: BaseChatModel, tag_model: BaseChatModel) -> None:
        self._summary_model = summary_model
        self._tag_model = tag_model

    async def stream_summary(self, content: str) -> AsyncIterator[str]:
        messages = [SystemMessage(content=SUMMARY_SYSTEM_PROMPT), HumanMessage(content=content)]
        async for chunk in self._summary_model.astream(messages):
            if chunk.content:
                yield chunk.content

    async def generate_text(self, system_prompt: str, user_prompt: str) -> str:
        message = await self._tag_model.ainvoke(
            [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        )
        return message.content if isinstance(message.content, str) else str(message.content)
