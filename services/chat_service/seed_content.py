"""
Seed content for a fresh session: the sample history list and the
introductory messages every new chat starts with.
"""

from typing import List

from config.app_config import ChatConfig
from services.chat_service.models import (
    HistoryConversationSummary,
    HistoryGroup,
    MessageTemplate,
    Role,
)

HISTORY_SEED: List[HistoryGroup] = [
    HistoryGroup("Today", (
        HistoryConversationSummary(
            conversation_id="today-1",
            title="Product launch prep",
            preview="Drafted announcement copy and QA checklist for beta release.",
            timestamp="2h ago",
        ),
        HistoryConversationSummary(
            conversation_id="today-2",
            title="Onboarding survey",
            preview="Outlined questions that capture first-week friction and success signals.",
            timestamp="4h ago",
        ),
        HistoryConversationSummary(
            conversation_id="today-3",
            title="Design critique notes",
            preview="Summarised feedback threads and grouped by priority / owner.",
            timestamp="6h ago",
        ),
    )),
    HistoryGroup("Earlier this week", (
        HistoryConversationSummary(
            conversation_id="week-1",
            title="Support triage ideas",
            preview="Generated macros for the top friction requests from this week.",
            timestamp="3 days ago",
        ),
        HistoryConversationSummary(
            conversation_id="week-2",
            title="Growth experiment doc",
            preview="Mapped out hypotheses, guardrail metrics, and rollout cadence.",
            timestamp="5 days ago",
        ),
    )),
]

INTERVIEW_OUTLINE = "\n".join([
    "Absolutely, here's a structured outline you can use:",
    "",
    "### Interview Outline",
    "1. **Warm up**: \"Can you tell me about your role and day-to-day responsibilities?\"",
    "2. **Motivation**: \"What made you start using [product/workflow]?\"",
    "3. **Current process**: \"Walk me through your last attempt step-by-step.\"",
    "4. **Pain points**: \"Where does it feel slow, confusing, or fragile?\"",
    "5. **Desired outcomes**: \"If this was effortless, what would that unlock for you?\"",
    "",
    "Happy to tailor this if you share the audience or use case!",
])


def intro_templates(chat: ChatConfig) -> List[MessageTemplate]:
    """Opening exchange shown in the primary conversation and every new chat"""
    return [
        MessageTemplate(
            role=Role.ASSISTANT,
            name=chat.assistant_name,
            avatar_fallback=chat.assistant_avatar,
            content=(
                f"Hey there! I'm {chat.assistant_name}, a playground assistant. Ask me anything about "
                "your product ideas, technical questions, or research tasks and I'll sketch out a plan "
                "you can wire up to your favourite model."
            ),
        ),
        MessageTemplate(
            role=Role.USER,
            name=chat.user_name,
            avatar_fallback=chat.user_avatar,
            content="Let's create a user interview outline that digs into motivation and workflow pains.",
        ),
        MessageTemplate(
            role=Role.ASSISTANT,
            name=chat.assistant_name,
            avatar_fallback=chat.assistant_avatar,
            markdown=True,
            content=INTERVIEW_OUTLINE,
        ),
    ]


def placeholder_template(chat: ChatConfig, title: str, preview: str) -> MessageTemplate:
    """Stand-in message for a history entry opened without loaded messages"""
    return MessageTemplate(
        role=Role.ASSISTANT,
        name=chat.assistant_name,
        avatar_fallback=chat.assistant_avatar,
        markdown=True,
        content="\n".join([
            f"This is a placeholder view for **{title}**.",
            "",
            preview,
            "",
            "Load real messages here by persisting conversations and hydrating them when the user opens the thread.",
        ]),
    )
