"""
Tests for provider selection and the simulated responder
"""

from langchain_core.messages import AIMessage, HumanMessage

from config.app_config import ChatConfig, ProviderConfig
from services.ai_service.provider_selector import ProviderSelector
from services.ai_service.responder import SimulatedResponder, build_chat_history
from services.chat_service.models import Attachment, Message, Role


class TestProviderSelector:
    """Test provider/model picking"""

    def setup_method(self):
        self.selector = ProviderSelector(ProviderConfig())

    def test_defaults(self):
        """Test the default provider and its first model"""
        assert self.selector.provider.id == "openai"
        assert self.selector.model.id == "gpt-4o"
        assert self.selector.summary() == "OpenAI • GPT-4o"

    def test_switching_provider_resets_unavailable_model(self):
        """Test the model falls back to the new provider's first model"""
        self.selector.select_provider("google")

        assert self.selector.provider.label == "Google Gemini"
        assert self.selector.model.id == "gemini-2.0-flash"

    def test_unknown_provider_falls_back(self):
        """Test unknown providers resolve to the first one"""
        self.selector.select_provider("anthropic")
        self.selector.select_provider("does-not-exist")

        assert self.selector.provider.id == "openai"
        assert self.selector.model.id == "gpt-4o"

    def test_select_model(self):
        """Test model selection within the provider"""
        self.selector.select_model("o3-mini")
        assert self.selector.summary() == "OpenAI • O3 mini"

        self.selector.select_model("claude-3.5-haiku")
        assert self.selector.model.id == "gpt-4o"


class TestSimulatedResponder:
    """Test the canned assistant reply"""

    def setup_method(self):
        self.responder = SimulatedResponder(ChatConfig())
        self.selector = ProviderSelector(ProviderConfig())

    def test_reply_without_attachments(self):
        """Test reply text and message shape"""
        reply = self.responder.reply([], self.selector.provider, self.selector.model, [], "r1")

        assert reply.message_id == "r1"
        assert reply.role is Role.ASSISTANT
        assert reply.name == "Nova"
        assert reply.content == (
            "Pretending to call OpenAI • GPT-4o.\n\n"
            "Swap this helper with your real API handler and stream tokens into the conversation."
        )

    def test_reply_mentions_attachments(self):
        """Test attachment count sentence"""
        text = self.responder.compose_text(self.selector.provider, self.selector.model, 3)

        assert "I spotted 3 attachments. Replace this with your vision/tool call." in text


def test_build_chat_history_includes_images():
    """Test conversion to LangChain messages"""
    attachment = Attachment("a1", "x.png", "image/png", 3, "data:image/png;base64,AAA=")
    messages = [
        Message(message_id="m1", role=Role.ASSISTANT, name="Nova", avatar_fallback="NO", content="Hi"),
        Message(message_id="m2", role=Role.USER, name="You", avatar_fallback="YO", content="Plain"),
        Message(
            message_id="m3", role=Role.USER, name="You", avatar_fallback="YO",
            content="Look", attachments=(attachment,),
        ),
    ]

    history = build_chat_history(messages)

    assert isinstance(history[0], AIMessage)
    assert isinstance(history[1], HumanMessage)
    assert history[1].content == "Plain"
    assert history[2].content == [
        {"type": "text", "text": "Look"},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAA="}},
    ]
