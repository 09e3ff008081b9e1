from __future__ import annotations

import json

from app.coach.context import FALLBACK_SEGMENT, build_context_snapshot
from app.coach.prompt import COACH_PERSONA_PROMPT, META_PREFIX, compose_messages, render_meta
from app.coach.schemas import LearnerProfile


def test_persona_carries_grounding_and_output_rules() -> None:
    text = COACH_PERSONA_PROMPT
    assert "first 90 days" in text
    assert "early wins" in text
    assert "neglecting horizontal relationships" in text
    assert "3 to 6 bullets" in text
    assert "reflective question" in text
    assert "Do NOT invent" in text
    assert "provider" in text


def test_messages_follow_fixed_order_with_meta() -> None:
    snapshot = build_context_snapshot(LearnerProfile(name="Ada"))
    messages = compose_messages(
        persona=COACH_PERSONA_PROMPT,
        snapshot=snapshot,
        meta={"riskIndex": 3},
        prompt="How should I approach week one?",
    )

    assert [m.role for m in messages] == ["system", "system", "system", "user"]
    assert messages[0].content == COACH_PERSONA_PROMPT
    assert messages[1].content.startswith("Profile snapshot (for context):")
    assert "Learner summary: Name: Ada" in messages[1].content
    assert messages[2].content == 'Exercise context: {"riskIndex": 3}'
    assert messages[3].content == "How should I approach week one?"


def test_empty_meta_produces_no_metadata_message() -> None:
    messages = compose_messages(
        persona="persona", snapshot=[FALLBACK_SEGMENT], meta={}, prompt="hello"
    )
    assert [m.role for m in messages] == ["system", "system", "user"]
    assert not any(m.content.startswith(META_PREFIX) for m in messages)


def test_meta_round_trips_with_key_order() -> None:
    meta = {"exerciseId": "w1", "riskIndex": 4, "bucket": {"id": "b2", "tags": ["trap"]}}
    rendered = render_meta(meta)

    assert rendered.startswith(META_PREFIX)
    decoded = json.loads(rendered[len(META_PREFIX) :])
    assert decoded == meta
    assert list(decoded) == ["exerciseId", "riskIndex", "bucket"]


def test_context_message_is_never_empty() -> None:
    messages = compose_messages(
        persona="persona",
        snapshot=build_context_snapshot(LearnerProfile()),
        meta={},
        prompt="hello",
    )
    assert "minimal information provided." in messages[1].content
