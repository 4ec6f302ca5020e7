"""Factory Boy factories for test data generation.

Available factories
-------------------
ContentItemPayloadFactory   - create-request dict for a content item
YouTubeItemPayloadFactory   - create-request dict for a YouTube video
OEmbedResponseFactory       - YouTube oEmbed JSON response body
"""

from __future__ import annotations

from tests.factories.content import (
    ContentItemPayloadFactory,
    OEmbedResponseFactory,
    YouTubeItemPayloadFactory,
    camel_payload,
)

__all__ = [
    "ContentItemPayloadFactory",
    "OEmbedResponseFactory",
    "YouTubeItemPayloadFactory",
    "camel_payload",
]
