"""
Re-hosts generated artwork on ImageKit so the emailed card outlives the
short-lived image URL returned by the image model.
"""
import hashlib
import logging

import requests

logger = logging.getLogger("image_store")

UPLOAD_TIMEOUT = 30


class ImageStoreError(Exception):
    """Upload to the image host failed."""


def image_file_name(source_url: str) -> str:
    """Collision-free target name: SHA-512 of the source URL."""
    return hashlib.sha512((source_url or "").encode("utf-8")).hexdigest() + ".png"


class ImageStore:
    def __init__(self, upload_url: str, private_key: str, folder: str = "/", session=None):
        self.upload_url = upload_url
        self.private_key = private_key
        self.folder = folder or "/"
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings) -> "ImageStore":
        return cls(
            upload_url=settings.imagekit_upload_url,
            private_key=settings.imagekit_private_key,
            folder=settings.imagekit_folder,
        )

    def save(self, source_url: str) -> str:
        """Upload the image at source_url and return its hosted URL."""
        if not source_url:
            raise ImageStoreError("Missing image URL")
        file_name = image_file_name(source_url)
        try:
            resp = self.session.post(
                self.upload_url,
                data={
                    "file": source_url,
                    "fileName": file_name,
                    "folder": self.folder,
                    "useUniqueFileName": "false",
                },
                auth=(self.private_key, ""),
                timeout=UPLOAD_TIMEOUT,
            )
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Image upload failed for %s: %s", file_name, e)
            raise ImageStoreError(str(e)) from e

        hosted_url = body.get("url") if isinstance(body, dict) else None
        if not hosted_url:
            raise ImageStoreError("Upload response has no url")
        logger.info("Saved image %s -> %s", file_name, hosted_url)
        return hosted_url
