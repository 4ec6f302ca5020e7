"""URL ingestion: classify a pasted link into a content item stub.

Classification:
    :func:`~learning_feed.ingestion.detect.classify_url` (offline, pure)

Enrichment:
    :class:`~learning_feed.ingestion.oembed.YouTubeOEmbedClient`

Configuration:
    :mod:`learning_feed.ingestion.config`

Notes:
    - The signature table is matched in order; the first hit wins.
    - Unknown URLs are classified as articles, never rejected.
"""
