"""Pydantic schemas for request/response validation.

Sub-modules:
    content   - ContentItemCreate/Update/Read, RateRequest, CompleteRequest,
                CompletionRead
    stats     - UserStatsRead
    ingestion - DetectRequest, DetectionResult

All schemas speak camelCase on the wire (``estimatedMinutes``) and accept
snake_case names on input as well.
"""

from __future__ import annotations
