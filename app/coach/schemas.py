from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CoachMode = Literal["openai", "stub", "error"]
MessageRole = Literal["system", "user"]


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _strings_or_none(value: Any) -> str | list[str] | None:
    """Accept a string or a list of strings; anything else counts as absent."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        items = [item for item in value if isinstance(item, str)]
        return items or None
    return None


class ProfileConsents(BaseModel):
    """
    Per-category opt-in flags.

    Fail-closed: only a literal JSON `true` grants consent. Missing flags, `false`,
    and truthy non-booleans (e.g. "true", 1) all count as no consent.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    store_job_description: bool = False
    use_linkedin: bool = False
    use_personal_site: bool = False

    @field_validator("*", mode="before")
    @classmethod
    def _only_literal_true(cls, value: Any) -> bool:
        return value is True


class LearnerProfile(BaseModel):
    """
    Untrusted, partially-populated learner data.

    Wrong-typed fields are coerced to absent rather than rejected; unknown keys are dropped
    so they can never reach the model.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    role: str | None = None
    org: str | None = None
    day90_outcomes: str | list[str] | None = None
    job_description_text: str | None = None
    linkedin: str | None = None
    personal_site_urls: str | list[str] | None = None
    consents: ProfileConsents = Field(default_factory=ProfileConsents)

    @field_validator("name", "role", "org", "job_description_text", "linkedin", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _string_or_none(value)

    @field_validator("day90_outcomes", "personal_site_urls", mode="before")
    @classmethod
    def _coerce_text_or_list(cls, value: Any) -> str | list[str] | None:
        return _strings_or_none(value)

    @field_validator("consents", mode="before")
    @classmethod
    def _coerce_consents(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class CoachingRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(
        min_length=1,
        description="Trimmed free-text coaching question or exercise summary.",
        examples=["How should I approach week one?"],
    )
    profile: LearnerProfile = Field(default_factory=LearnerProfile)
    meta: dict[str, Any] = Field(
        default_factory=dict,
        description="Exercise context (e.g. riskIndex, bucket). Key order is preserved.",
        examples=[{"exerciseId": "w1-stakeholders", "riskIndex": 3}],
    )


@dataclass(frozen=True)
class ContextSegment:
    label: str
    text: str

    def render(self) -> str:
        return f"{self.label}: {self.text}"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str


@dataclass(frozen=True)
class CoachReply:
    mode: Literal["openai", "stub"]
    reply: str


class ResponseEnvelope(BaseModel):
    """Single outbound shape for every POST /coach outcome."""

    ok: bool = Field(description="True when a reply was produced (live or stub).")
    mode: CoachMode = Field(
        description="`openai` for live replies, `stub` for degraded mode, `error` on failure."
    )
    reply: str | None = Field(default=None, description="Coaching reply text (ok=true only).")
    error: str | None = Field(default=None, description="Generic error message (ok=false only).")

    @model_validator(mode="after")
    def _check_invariants(self) -> ResponseEnvelope:
        if self.ok:
            if self.mode == "error":
                raise ValueError("ok=true envelopes cannot use mode 'error'")
            if self.reply is None or self.error is not None:
                raise ValueError("ok=true envelopes carry a reply and no error")
        else:
            if self.mode != "error":
                raise ValueError("ok=false envelopes must use mode 'error'")
            if self.error is None or self.reply is not None:
                raise ValueError("ok=false envelopes carry an error and no reply")
        return self


class CoachHealthOut(BaseModel):
    """GET /coach liveness response."""

    ok: bool = Field(examples=[True])
    message: str = Field(examples=["Coach API is alive"])
