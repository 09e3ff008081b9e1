"""Consent-gated context snapshot for coaching prompts.

The snapshot is the only place learner profile data enters the model input, so the
rules live here in one place:
- Third-party-sourced fields (job description, LinkedIn, personal site) require an
  explicit consent flag; missing flags mean no.
- Long-form fields are length-capped with a visible truncation marker.
- Personal site URLs are passed as reference strings only and are never fetched.
- The snapshot is never empty; a fallback segment is emitted when nothing applies.
"""

from __future__ import annotations

from app.coach.schemas import ContextSegment, LearnerProfile

TRUNCATION_MARKER = " …[truncated]"

LONG_FIELD_MAX_CHARS = 1200
MEDIUM_FIELD_MAX_CHARS = 800

SNAPSHOT_HEADER = "Profile snapshot (for context):"
LEARNER_SUMMARY_LABEL = "Learner summary"
FALLBACK_SEGMENT = ContextSegment(label="Profile", text="minimal information provided.")


def truncate_text(text: str, max_chars: int) -> str:
    """Return `text` unchanged if it fits, else its first `max_chars` chars plus a marker."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def _clean(value: str | list[str] | None, *, separator: str = "; ") -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        value = separator.join(item.strip() for item in value if item.strip())
    return value.strip()


def _learner_summary(profile: LearnerProfile) -> ContextSegment | None:
    parts = [
        f"{label}: {value}"
        for label, value in (
            ("Name", _clean(profile.name)),
            ("Role", _clean(profile.role)),
            ("Org", _clean(profile.org)),
        )
        if value
    ]
    if not parts:
        return None
    return ContextSegment(label=LEARNER_SUMMARY_LABEL, text=" | ".join(parts))


def build_context_snapshot(profile: LearnerProfile) -> list[ContextSegment]:
    """Build the ordered, bounded context segments for one request. Never raises."""

    segments: list[ContextSegment] = []
    consents = profile.consents

    summary = _learner_summary(profile)
    if summary is not None:
        segments.append(summary)

    # Self-authored goals are not third-party data, so no consent flag applies.
    outcomes = _clean(profile.day90_outcomes)
    if outcomes:
        segments.append(
            ContextSegment(
                label="Day 90 outcomes (learner's words)",
                text=truncate_text(outcomes, LONG_FIELD_MAX_CHARS),
            )
        )

    job_description = _clean(profile.job_description_text)
    if consents.store_job_description and job_description:
        segments.append(
            ContextSegment(
                label="Job description excerpt",
                text=truncate_text(job_description, LONG_FIELD_MAX_CHARS),
            )
        )

    linkedin = _clean(profile.linkedin)
    if consents.use_linkedin and linkedin:
        segments.append(
            ContextSegment(
                label="LinkedIn content (URL or pasted sections)",
                text=truncate_text(linkedin, MEDIUM_FIELD_MAX_CHARS),
            )
        )

    site_urls = _clean(profile.personal_site_urls, separator=", ")
    if consents.use_personal_site and site_urls:
        segments.append(
            ContextSegment(
                label="Personal site URLs (for context only, do NOT fetch)",
                text=site_urls,
            )
        )

    if not segments:
        segments.append(FALLBACK_SEGMENT)

    return segments


def render_context_snapshot(segments: list[ContextSegment]) -> str:
    lines = [SNAPSHOT_HEADER]
    lines.extend(segment.render() for segment in segments)
    return "\n".join(lines)
