"""Runtime settings read from the environment."""

import os

DEFAULT_ADMIN_EMAIL = "admin@souqlink.com"


def admin_email() -> str:
    """Email address that is always registered with the admin role."""
    return os.getenv("SOUQLINK_ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL).strip().lower()


def upload_dir() -> str:
    return os.getenv("UPLOAD_DIR", "uploads")


def image_store_adapter() -> str:
    return os.getenv("IMAGE_STORE", "local")
