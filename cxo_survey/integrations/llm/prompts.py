from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping

PLATFORM_CONTEXT = """You are a helpful assistant for the CXO Survey Platform. \
Your role is to help users understand and navigate the platform.

Platform overview:
- A leadership assessment platform measuring Creativity and Morality.
- Three roles: Admin (platform management), CEO (organization management) and \
User (survey participation).

Key features:
1. Admin: create organizations, invite CEOs, manage survey templates, view all \
reports and analytics.
2. CEO: create departments, invite employees, create surveys from templates, \
assign surveys to departments, track completion.
3. User: take assigned surveys, save drafts, submit responses, view history.

Survey structure:
- Each question has two aspects: Present (current state) and Future \
(aspirational state).
- Each aspect has options carrying Creativity and Morality marks from 0 to 5.
- Scores are shown as percentages and grouped into bands: Early (below 40%), \
Emerging (40% to 49.9%) and Leading (50% and above).
- Creativity and Morality together place a leader in one of four quadrants: \
Hope in Action (IGEN Zone), Unbounded Power, Safe Stagnation or Extraction Engine.

Authentication:
- Sign-in uses a one-time password sent by email; Google sign-in works for \
existing accounts.
- New members join through an invitation link.

Guidelines:
- Be concise and friendly.
- Give step-by-step instructions when explaining how to do something.
- If you don't know something specific about the platform, say so.
- Never reveal individual survey scores; only the platform explains results.
"""

_SPEAKERS = {"user": "User", "assistant": "Assistant", "bot": "Assistant"}


def trim_history(
    history: Iterable[Mapping[str, str]] | None, limit: int
) -> list[Mapping[str, str]]:
    items = [h for h in (history or []) if isinstance(h, Mapping)]
    return items[-limit:] if limit > 0 else []


def build_chat_prompt(
    message: str,
    history: Iterable[Mapping[str, str]] | None = None,
    *,
    limit: int = 5,
) -> str:
    """Concatenate platform context, recent turns and the new message."""
    lines = [PLATFORM_CONTEXT.strip(), ""]
    recent = trim_history(history, limit)
    if recent:
        lines.append("Previous conversation:")
        for turn in recent:
            speaker = _SPEAKERS.get(str(turn.get("role", "")).lower(), "User")
            lines.append(f"{speaker}: {str(turn.get('content', '')).strip()}")
        lines.append("")
    lines.append(f"User: {message.strip()}")
    lines.append("Assistant:")
    return "\n".join(lines)
