"""Image store port — abstract interface for product image storage.

Routes program against the port; the adapter is chosen via configuration.
"""

from abc import ABC, abstractmethod


class ImageStorePort(ABC):
    """Abstract interface for image store adapters."""

    @abstractmethod
    def save(self, filename: str, content: bytes, content_type: str | None = None) -> str:
        """Store an image and return the URL clients use to fetch it."""
        ...

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Remove a stored image. Returns False when nothing was stored at that URL."""
        ...
