"""Image store abstraction — pluggable product image storage."""

from souqlink.utils.settings import image_store_adapter, upload_dir

_image_store_instance = None


def get_image_store():
    """Return the configured image store adapter (singleton).

    Uses the local disk store by default; set IMAGE_STORE=fake to keep
    images in memory.
    """
    global _image_store_instance
    if _image_store_instance is None:
        adapter = image_store_adapter()
        if adapter == "local":
            from souqlink.media.local_adapter import LocalImageStore

            _image_store_instance = LocalImageStore(upload_dir())
        elif adapter == "fake":
            from souqlink.media.fake_adapter import FakeImageStore

            _image_store_instance = FakeImageStore()
        else:
            raise ValueError(f"Unknown image store adapter: {adapter}")
    return _image_store_instance


def reset_image_store():
    """Reset the image store singleton (useful for testing)."""
    global _image_store_instance
    _image_store_instance = None
