"""
Image hosting

Clients submit images as base64 data URIs; they are pushed to Cloudinary
and the returned secure URL is what gets stored. Values that are already
URLs pass through untouched.
"""

import logging
from typing import Dict, Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from config import Settings
from errors import AppError, BadRequest

logger = logging.getLogger(__name__)


class ImageUploadError(AppError):
    status_code = 502


def is_base64_image(value) -> bool:
    return isinstance(value, str) and value.startswith("data:image/")


def decoded_size(data_uri: str) -> int:
    payload = data_uri.split(",", 1)[-1].strip()
    return len(payload) * 3 // 4 - payload[-2:].count("=")


class ImageUploader:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, max_file_size: int, timeout: float = 30):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.max_file_size = max_file_size
        self.timeout = timeout
        if self.configured:
            cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageUploader":
        return cls(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            settings.max_file_size,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, data_uri: str, folder: str = "general", public_id: Optional[str] = None) -> str:
        if decoded_size(data_uri) > self.max_file_size:
            raise BadRequest(f"حجم الصورة يتجاوز الحد المسموح ({self.max_file_size} بايت)")
        params = {"folder": folder}
        if public_id:
            params["public_id"] = public_id
        url = self._send(data_uri, params)
        logger.info("Uploaded image to %s", url)
        return url

    def upload_if_base64(self, value: Optional[str], folder: str = "general", public_id: Optional[str] = None) -> Optional[str]:
        if is_base64_image(value):
            return self.upload(value, folder, public_id)
        return value

    def _send(self, data_uri: str, params: Dict[str, str]) -> str:
        if not self.configured:
            raise ImageUploadError("Cloudinary upload failed: credentials are not configured")
        try:
            result = cloudinary.uploader.upload(
                data_uri,
                resource_type="image",
                quality="auto",
                fetch_format="auto",
                timeout=self.timeout,
                **params,
            )
        except cloudinary.exceptions.Error as e:
            raise ImageUploadError(f"Cloudinary upload failed: {e}") from e
        return result["secure_url"]
