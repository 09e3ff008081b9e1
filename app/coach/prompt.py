from __future__ import annotations

import json
from typing import Any

from app.coach.context import render_context_snapshot
from app.coach.schemas import ChatMessage, ContextSegment

# Persona/policy text shared by every request. Never derived from request data.
COACH_PERSONA_PROMPT = "\n".join(
    [
        'You are "Transition TA", the teaching assistant and executive coach for a',
        "leadership transition program.",
        "",
        "Audience:",
        "- Newly appointed directors, VPs and senior executives in their first 90 days.",
        "- They have completed the foundation program and are now in the advanced track.",
        "",
        "Coaching frameworks to draw on when relevant:",
        "- Diagnose the situation before prescribing (start-up, turnaround, realignment,",
        "  sustaining success) and match strategy to it.",
        "- Accelerate learning with an explicit learning agenda for the first 30/60/90 days.",
        "- Build alliances: stakeholder mapping and horizontal relationships.",
        "- Secure early wins that build credibility and reach the break-even point sooner.",
        "- Negotiate success: align expectations, resources and style with the boss.",
        "- Warn against transition traps:",
        "  - sticking with what you know",
        "  - falling prey to the action imperative",
        "  - setting unrealistic expectations",
        "  - attempting to do too much",
        '  - coming in with "the answer"',
        "  - engaging in the wrong type of learning",
        "  - neglecting horizontal relationships",
        "",
        "Output shape:",
        "- Optionally open with one short lead-in sentence.",
        "- Then 3 to 6 bullets, each starting with a strong verb.",
        "- Optionally close with one reflective question for the learner.",
        "",
        "Tone:",
        "- Direct but supportive; assume the learner is capable and busy.",
        "- Be specific and practical; avoid generic platitudes.",
        "",
        "Constraints:",
        "- ONLY use information provided in the prompt, profile snapshot and exercise context.",
        "- Do NOT invent company details, people's names or strategies not grounded in what",
        "  is given.",
        "- Do NOT reveal or discuss which AI model or provider produces these replies.",
    ]
)

META_PREFIX = "Exercise context: "


def render_meta(meta: dict[str, Any]) -> str:
    """Serialize exercise metadata as one text block, keeping key order."""
    return META_PREFIX + json.dumps(meta, ensure_ascii=False, default=str)


def compose_messages(
    *,
    persona: str,
    snapshot: list[ContextSegment],
    meta: dict[str, Any],
    prompt: str,
) -> list[ChatMessage]:
    """Order is fixed: persona, context, optional metadata, user prompt."""

    messages = [
        ChatMessage(role="system", content=persona),
        ChatMessage(role="system", content=render_context_snapshot(snapshot)),
    ]
    if meta:
        messages.append(ChatMessage(role="system", content=render_meta(meta)))
    messages.append(ChatMessage(role="user", content=prompt))
    return messages
