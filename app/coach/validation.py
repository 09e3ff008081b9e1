from __future__ import annotations

import json
from typing import Any

from app.coach.schemas import CoachingRequest, LearnerProfile
from app.domain.exceptions import InvalidPayloadError, MissingPromptError


def parse_coaching_request(body: bytes | str) -> CoachingRequest:
    """
    Parse a raw POST /coach body into a typed CoachingRequest.

    Strict on `prompt` (the only field whose absence makes the request meaningless),
    lenient on `profile` and `meta`: wrong-typed values become empty containers.
    """

    try:
        raw: Any = json.loads(body)
    except (ValueError, TypeError, RecursionError) as exc:
        raise InvalidPayloadError() from exc

    if not isinstance(raw, dict):
        raise InvalidPayloadError()

    prompt = raw.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise MissingPromptError()

    profile = raw.get("profile")
    meta = raw.get("meta")

    return CoachingRequest(
        prompt=prompt.strip(),
        profile=LearnerProfile.model_validate(profile if isinstance(profile, dict) else {}),
        meta=meta if isinstance(meta, dict) else {},
    )
