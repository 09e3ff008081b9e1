"""LLM integration layer.

This package is intentionally small and conservative:
- No prompt/output logging (learner data).
- Configurable via environment variables.
- One upstream call per invocation: no retries, no caching.
"""
