"""General conversation tool."""

from conductor_server.models.tools import ChatInput
from conductor_server.tools.base import ConversationalTool
from conductor_server.workflow import ResolvedConversation

THINKING_MODE_PROMPT = """You are operating in {mode} thinking mode. Adjust your reasoning depth accordingly:
- minimal: Quick, direct responses
- low: Basic reasoning
- medium: Moderate analysis
- high: Deep analysis with multiple perspectives
- max: Comprehensive reasoning with extensive exploration"""


class ChatTool(ConversationalTool):
    """Collaborative chat with a local model.

    A new conversation id is reported at the end of the reply whenever this
    call started a conversation, including when a stale continuation id was
    replaced.
    """

    name = "chat"
    description = (
        "General chat and collaborative thinking partner for brainstorming, "
        "development discussion, getting second opinions, and exploring ideas. "
        "Use for ideas, validations, questions, and thoughtful explanations."
    )
    input_model = ChatInput

    def conversation_metadata(self, params: ChatInput) -> dict:
        return {
            "tool": self.name,
            "model": self.select_model(params),
            "thinking_mode": params.thinking_mode,
        }

    def system_prompt(self, params: ChatInput) -> str | None:
        if params.thinking_mode:
            return THINKING_MODE_PROMPT.format(mode=params.thinking_mode)
        return None

    def temperature(self, params: ChatInput) -> float | None:
        return params.temperature

    def build_prompt(self, params: ChatInput, conversation: ResolvedConversation) -> str:
        context = []
        if params.files:
            context.append(
                "Context files:\n" + "\n".join(f"File: {path}" for path in params.files)
            )
        if params.images:
            context.append(
                "Images:\n" + "\n".join(f"Image: {path}" for path in params.images)
            )
        if not context:
            return params.prompt
        return "\n\n".join([*context, params.prompt])

    def render_response(
        self, params: ChatInput, reply: str, conversation: ResolvedConversation
    ) -> str:
        if not conversation.is_new:
            return reply
        return (
            f"{reply}\n\n---\n*Conversation ID: {conversation.conversation_id}*\n"
            "Use this continuation_id to continue this conversation."
        )
