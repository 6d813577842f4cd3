from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from whoami.models.session import Turn

_ROLE_MAP = {"human": "user", "assistant": "assistant", "system": "system"}

NARRATIVE_PROMPT = (
    "Create a story about {subject} covering their background, career highlights, "
    "and personal interests. Use narrative storytelling format, not Q&A. Make it "
    "engaging and coherent."
)


def build_system_prompt(context: str, char_limit: int) -> str:
    return (
        "You are a helpful AI assistant that answers questions about a person based on "
        "the provided information.\n\n"
        "Here is the information about the person:\n\n"
        f"{context}\n\n"
        "Instructions:\n"
        "- Answer questions based only on the information provided above\n"
        "- Be conversational and friendly\n"
        "- If asked about something not in the documents, politely say you don't have "
        "that information\n"
        "- Keep responses extremely concise but informative\n"
        f"- Keep response character length within {char_limit} characters, unless the "
        "prompt explicitly said otherwise\n"
        "- You can ask follow-up questions to better understand what the user wants to know"
    )


def build_narrative_message(
    subject: str, length: int, custom_prompt: str | None = None
) -> str:
    sections = [NARRATIVE_PROMPT.format(subject=subject)]
    if custom_prompt:
        sections.append(custom_prompt.strip())
    sections.append(
        f"IMPORTANT: the narrative must be no longer than {length} characters."
    )
    return "\n\n".join(sections)


def to_chat_message(turn: Turn) -> dict[str, str]:
    return {"role": _ROLE_MAP[turn.role], "content": turn.content}


def build_messages(
    system_prompt: str, history: Iterable[Turn], message: str
) -> List[dict[str, str]]:
    """Return ``[system, *history, user]`` in that exact order."""
    return [
        {"role": "system", "content": system_prompt},
        *(to_chat_message(turn) for turn in history),
        {"role": "user", "content": message},
    ]


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_message: str
    history: Tuple[Turn, ...] = field(default_factory=tuple)

    def to_messages(self) -> List[dict[str, str]]:
        return build_messages(self.system_prompt, self.history, self.user_message)
