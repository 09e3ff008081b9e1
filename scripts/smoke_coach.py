"""Post canned coaching requests to a running instance.

Sanity check after deploys or config changes:
- GET /coach must answer 200
- POST /coach must return the envelope (stub mode when OPENAI_API_KEY is unset)
- A blank prompt must be rejected with 400

Target defaults to http://localhost:8000; override with COACH_API_URL.
Profiles below are synthetic.
"""

from __future__ import annotations

import json
import os

import httpx


def _cases() -> list[tuple[str, dict]]:
    return [
        (
            "week one, outcomes only",
            {
                "prompt": "How should I approach week one?",
                "profile": {"day90_outcomes": "ship a working pilot"},
            },
        ),
        (
            "consented job description with exercise context",
            {
                "prompt": "Which early win should I go after first?",
                "profile": {
                    "name": "Sample Learner",
                    "role": "VP Operations",
                    "org": "Example Corp",
                    "job_description_text": "Own fulfilment operations across three regions.",
                    "consents": {"store_job_description": True},
                },
                "meta": {"exerciseId": "early-wins-1", "riskIndex": 2},
            },
        ),
        ("blank prompt (expect 400)", {"prompt": "   "}),
    ]


def main() -> None:
    """Entry point."""
    base_url = os.getenv("COACH_API_URL", "http://localhost:8000").rstrip("/")

    with httpx.Client(base_url=base_url, timeout=60.0) as client:
        health = client.get("/coach")
        print(f"GET /coach -> {health.status_code} {health.text}")

        for title, payload in _cases():
            res = client.post("/coach", json=payload)
            print(f"\n[{title}] POST /coach -> {res.status_code}")
            print(json.dumps(res.json(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
