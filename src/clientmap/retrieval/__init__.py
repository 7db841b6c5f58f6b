"""
Retrieval strategies for the source export.

Strategies are tried in order by the pipeline; each one either returns a
plausible payload or raises RetrievalFailedError.
"""

from clientmap.retrieval.base import (
    MIN_PAYLOAD_LENGTH,
    RetrievalStrategy,
    is_plausible_payload,
)
from clientmap.retrieval.strategies import (
    DEFAULT_PROXY_TEMPLATES,
    DirectStrategy,
    ProxyStrategy,
    build_strategies,
    resolve_source_url,
)

__all__ = [
    "DEFAULT_PROXY_TEMPLATES",
    "MIN_PAYLOAD_LENGTH",
    "DirectStrategy",
    "ProxyStrategy",
    "RetrievalStrategy",
    "build_strategies",
    "is_plausible_payload",
    "resolve_source_url",
]
