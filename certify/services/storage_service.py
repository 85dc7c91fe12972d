"""
Storage Service

Uploads rendered certificates to Cloudinary and returns their public URL.

Without a configured cloud name the uploader runs in degraded mode and
returns the placeholder URL instead of failing.
"""

import hashlib
import logging
import time
from typing import Callable, Optional

import httpx

from certify.core.config import Settings
from certify.core.exceptions import UpstreamError
from certify.core.http_client import get_http_client


logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


def sign_params(params: dict, api_secret: str) -> str:
    """
    Cloudinary request signature.

    Parameters are sorted by name, joined as ``k=v`` with ``&`` and the API
    secret is appended before SHA-1 hashing.
    """
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] != "")
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    """Signed image uploads to a Cloudinary account."""

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[], httpx.AsyncClient] = get_http_client,
    ):
        self.settings = settings
        self._client_factory = client_factory

    @property
    def configured(self) -> bool:
        return self.settings.storage_configured

    async def upload(self, image: bytes, folder: Optional[str] = None, filename: str = "certificate.png") -> str:
        """
        Upload an encoded image.

        Args:
            image: PNG bytes.
            folder: Destination folder, defaults to CLOUDINARY_FOLDER.
            filename: Name reported for the multipart file part.

        Returns:
            str: The ``secure_url`` of the uploaded asset, or the
            placeholder URL when storage is not configured.

        Raises:
            UpstreamError: If Cloudinary rejects the upload or is unreachable.
        """
        if not self.configured:
            logger.warning("Cloudinary is not configured, using placeholder image URL")
            return self.settings.PLACEHOLDER_IMAGE_URL

        params = {
            "folder": folder or self.settings.CLOUDINARY_FOLDER,
            "timestamp": str(int(time.time())),
        }
        data = {
            **params,
            "api_key": self.settings.CLOUDINARY_API_KEY,
            "signature": sign_params(params, self.settings.CLOUDINARY_API_SECRET),
        }
        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.settings.CLOUDINARY_CLOUD_NAME)

        try:
            response = await self._client_factory().post(
                url,
                data=data,
                files={"file": (filename, image, "image/png")},
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Image upload failed: {e}") from e

        if response.status_code >= 400:
            raise UpstreamError(f"Image upload failed: {_error_message(response)}")

        secure_url = response.json().get("secure_url")
        if not secure_url:
            raise UpstreamError("Image upload failed: response has no secure_url")

        logger.info(f"Uploaded certificate image to {secure_url}")
        return secure_url


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"
