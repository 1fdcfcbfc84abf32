from supabase import Client
from urllib.parse import urlparse
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ImageStorage:
    """Public image bucket in Supabase Storage"""

    def __init__(self, supabase: Client, bucket_name: str):
        if not bucket_name:
            raise ValueError("Storage bucket name must be configured")
        self.supabase = supabase
        self.bucket_name = bucket_name

    @property
    def bucket(self):
        return self.supabase.storage.from_(self.bucket_name)

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload (overwriting any previous object at key) and return the public URL"""
        try:
            self.bucket.upload(
                key,
                file_content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "true",
                },
            )
            return self.bucket.get_public_url(key)
        except Exception as e:
            logger.error(f"Failed to upload {key} to {self.bucket_name}: {str(e)}")
            raise

    def delete_files(self, keys: List[str]) -> bool:
        """Delete objects; failures are logged and reported, not raised"""
        if not keys:
            return True
        try:
            self.bucket.remove(keys)
            return True
        except Exception as e:
            logger.error(f"Failed to delete {keys} from {self.bucket_name}: {str(e)}")
            return False

    def key_from_url(self, public_url: Optional[str]) -> Optional[str]:
        """Object key of a public URL produced by this bucket (…/public/<bucket>/<key>)"""
        if not public_url:
            return None
        path = urlparse(public_url).path
        marker = f"/{self.bucket_name}/"
        if marker not in path:
            return None
        return path.split(marker, 1)[1] or None

    def delete_by_url(self, public_url: Optional[str]) -> bool:
        key = self.key_from_url(public_url)
        if key is None:
            return False
        return self.delete_files([key])


def image_extension(content_type: Optional[str]) -> Optional[str]:
    return ALLOWED_IMAGE_TYPES.get((content_type or "").lower())
