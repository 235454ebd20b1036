# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles media upload/download operations with Supabase Storage.
#
# Layout inside the bucket:
#   campaigns/{campaign_id}/source_{filename}   uploaded source media
#   campaigns/{campaign_id}/image.png           generated image
#   campaigns/{campaign_id}/video.mp4           generated video
# =============================================================================

import logging
import mimetypes

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError, StorageDownloadError

logger = logging.getLogger(__name__)

IMAGE_FILENAME = "image.png"
VIDEO_FILENAME = "video.mp4"


def campaign_folder(campaign_id: str) -> str:
    return f"campaigns/{campaign_id}"


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading and downloading campaign media to/from storage.
    """

    @staticmethod
    def _bucket():
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def upload_bytes(path: str, content: bytes, content_type: str) -> str:
        """
        Upload raw bytes to a storage path, replacing any existing file.

        Returns:
            Storage path

        Raises:
            StorageUploadError: If upload fails
        """
        try:
            StorageService._bucket().upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )
            logger.info(f"Uploaded file to storage: {path} ({len(content)} bytes)")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def upload_source_file(campaign_id: str, file_content: bytes, filename: str) -> str:
        """
        Upload the creator's source media for a campaign.

        Args:
            campaign_id: Campaign UUID
            file_content: File bytes
            filename: Original filename

        Returns:
            Storage path
        """
        path = f"{campaign_folder(campaign_id)}/source_{filename}"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return StorageService.upload_bytes(path, file_content, content_type)

    @staticmethod
    def upload_generated_image(campaign_id: str, data: bytes, content_type: str = "image/png") -> str:
        """Upload the generated image and return its storage path."""
        path = f"{campaign_folder(campaign_id)}/{IMAGE_FILENAME}"
        return StorageService.upload_bytes(path, data, content_type)

    @staticmethod
    def upload_generated_video(campaign_id: str, data: bytes) -> str:
        """Upload the assembled video and return its storage path."""
        path = f"{campaign_folder(campaign_id)}/{VIDEO_FILENAME}"
        return StorageService.upload_bytes(path, data, "video/mp4")

    @staticmethod
    def download_raw(storage_path: str) -> bytes:
        """
        Download raw file content from storage.

        Raises:
            StorageDownloadError: If download fails
        """
        try:
            response = StorageService._bucket().download(storage_path)
            logger.info(f"Downloaded raw file from storage: {storage_path}")
            return response

        except Exception as e:
            logger.error(f"Storage download failed: {e}")
            raise StorageDownloadError(storage_path, str(e))

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """Get a public URL for a storage file."""
        try:
            return StorageService._bucket().get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise

    @staticmethod
    def list_files(campaign_id: str) -> list[dict]:
        """List all files stored for a campaign."""
        try:
            response = StorageService._bucket().list(campaign_folder(campaign_id))
            return response or []

        except Exception as e:
            logger.error(f"Failed to list files: {e}")
            return []

    @staticmethod
    def delete_campaign_files(campaign_id: str) -> int:
        """
        Delete every stored file of a campaign.

        Returns:
            Number of files removed (0 if listing or removal failed)
        """
        folder = campaign_folder(campaign_id)
        files = StorageService.list_files(campaign_id)
        paths = [f"{folder}/{f['name']}" for f in files if f.get("name")]
        if not paths:
            return 0

        try:
            StorageService._bucket().remove(paths)
            logger.info(f"Deleted {len(paths)} files for campaign {campaign_id}")
            return len(paths)

        except Exception as e:
            logger.error(f"Failed to delete campaign files: {e}")
            return 0
