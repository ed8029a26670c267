"""
Asset Store - durable storage for uploaded resumes.

Resumes are uploaded to Cloudinary with automatic resource-type detection;
the application record keeps only the returned secure URL.
"""

from typing import Protocol

import cloudinary
import cloudinary.uploader
from fastapi import Depends

from jobsearch.core.config import Settings, get_settings


class AssetStore(Protocol):
    def upload(self, path: str) -> str:
        """Upload the file at `path`; return its durable retrieval URL."""
        ...


class CloudinaryAssetStore:
    def __init__(self, settings: Settings):
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )

    def upload(self, path: str) -> str:
        result = cloudinary.uploader.upload(path, resource_type="auto")
        return result["secure_url"]


def get_asset_store(settings: Settings = Depends(get_settings)) -> AssetStore:
    return CloudinaryAssetStore(settings)
