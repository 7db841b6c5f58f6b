"""
Base class for retrieval strategies.

Every strategy fetches the same source document through a different route
and is judged by the same success predicate.
"""

from abc import ABC, abstractmethod

import requests

from clientmap.errors import RetrievalFailedError
from clientmap.utils.logging import get_logger

log = get_logger(__name__)

# Payloads shorter than this are treated as truncated or error pages.
# Tunable; not derived from any property of the data.
MIN_PAYLOAD_LENGTH = 50


def is_plausible_payload(payload: str | None, min_length: int = MIN_PAYLOAD_LENGTH) -> bool:
    """Whether a payload is non-empty and at least ``min_length`` characters."""
    return bool(payload) and len(payload) >= min_length


class RetrievalStrategy(ABC):
    """
    Abstract base class for retrieval strategies.

    Subclasses only decide which URL to request; transport handling and the
    plausibility check are shared.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def build_url(self, source_url: str) -> str:
        """Return the URL to request for the given source document."""
        ...

    def fetch(
        self,
        source_url: str,
        session: requests.Session,
        *,
        timeout: float,
        min_length: int = MIN_PAYLOAD_LENGTH,
    ) -> str:
        """
        Fetch the source document through this strategy.

        Args:
            source_url: Canonical source document URL.
            session: HTTP session.
            timeout: Per-attempt timeout in seconds.
            min_length: Plausibility threshold for the payload.

        Returns:
            Payload text.

        Raises:
            RetrievalFailedError: On transport error, non-2xx status, or an
                empty or truncated payload.
        """
        url = self.build_url(source_url)
        log.debug("Requesting payload", strategy=self.name, url=url)

        try:
            response = session.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RetrievalFailedError(self.name, str(e)) from e

        # Exports usually omit the charset; requests would assume latin-1
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8"
        payload = response.text

        if not is_plausible_payload(payload, min_length):
            size = len(payload) if payload else 0
            msg = f"implausible payload ({size} chars, need {min_length})"
            raise RetrievalFailedError(self.name, msg)

        return payload

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
