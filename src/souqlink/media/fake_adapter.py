"""Fake image store — keeps uploads in memory for tests and development."""

from uuid import uuid4

from souqlink.media.port import ImageStorePort


class FakeImageStore(ImageStorePort):
    def __init__(self):
        self.images: dict[str, bytes] = {}

    def save(self, filename: str, content: bytes, content_type: str | None = None) -> str:
        url = f"https://images.fake.example.com/{uuid4().hex[:12]}-{filename or 'image'}"
        self.images[url] = content
        return url

    def delete(self, url: str) -> bool:
        return self.images.pop(url, None) is not None
