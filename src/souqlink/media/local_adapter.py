"""Local disk image store — files under UPLOAD_DIR, served at /uploads."""

import time
from pathlib import Path
from uuid import uuid4

from souqlink.media.port import ImageStorePort

URL_PREFIX = "/uploads/"


class LocalImageStore(ImageStorePort):
    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, filename: str, content: bytes, content_type: str | None = None) -> str:
        suffix = Path(filename or "").suffix.lower()
        stored_name = f"{int(time.time() * 1000)}-{uuid4().hex[:10]}{suffix}"
        (self.directory / stored_name).write_bytes(content)
        return URL_PREFIX + stored_name

    def delete(self, url: str) -> bool:
        if not url or not url.startswith(URL_PREFIX):
            return False
        path = self.directory / Path(url[len(URL_PREFIX) :]).name
        if not path.exists():
            return False
        path.unlink()
        return True
