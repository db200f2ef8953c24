"""
Storage Repository - product images in a Supabase Storage bucket

Author: TM3
Date: 2026-03-02
"""
import logging
import mimetypes
import uuid
from typing import List, Optional

import httpx
from supabase import StorageException

from storefront.core.config import settings
from storefront.core.database import get_supabase
from storefront.core.errors import BackendError, NotFoundError

logger = logging.getLogger(__name__)


class StorageRepository:
    """Upload, fetch and remove files in the configured bucket"""

    def __init__(self, bucket: Optional[str] = None):
        self.bucket = bucket or settings.STORAGE_BUCKET

    def _bucket(self):
        return get_supabase().storage.from_(self.bucket)

    @staticmethod
    def new_file_id(filename: str) -> str:
        """Unique object name keeping the original extension"""
        extension = ""
        if filename and "." in filename:
            extension = "." + filename.rsplit(".", 1)[1].lower()
        return f"{uuid.uuid4().hex}{extension}"

    def upload(self, content: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """
        Store a file

        Returns:
            The file id to keep in Product.image_urls
        """
        file_id = self.new_file_id(filename)
        content_type = content_type or mimetypes.guess_type(filename or "")[0] or "application/octet-stream"

        try:
            self._bucket().upload(path=file_id, file=content, file_options={"content-type": content_type})
        except (StorageException, httpx.HTTPError) as e:
            logger.error(f"Error uploading {filename} to {self.bucket}: {e}")
            raise BackendError("Image upload failed") from e

        logger.info(f"Uploaded {filename} as {file_id}")
        return file_id

    def download(self, file_id: str) -> bytes:
        try:
            return self._bucket().download(file_id)
        except (StorageException, httpx.HTTPError) as e:
            logger.warning(f"Error downloading {file_id}: {e}")
            raise NotFoundError("Image not found") from e

    def public_url(self, file_id: str) -> str:
        return self._bucket().get_public_url(file_id)

    def remove(self, file_ids: List[str]) -> None:
        if not file_ids:
            return
        try:
            self._bucket().remove(file_ids)
        except (StorageException, httpx.HTTPError) as e:
            logger.error(f"Error removing files {file_ids}: {e}")
            raise BackendError("Image removal failed") from e
