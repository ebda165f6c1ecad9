# storefront/core/image_store.py
# Product images in Supabase Storage.
import logging
from functools import lru_cache

from supabase import Client, create_client

from storefront.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

BUCKET = "assets"


@lru_cache
def supabase_admin() -> Client:
    """
    Supabase client with the service role key, built on first use so the API
    starts without Supabase credentials.

    Never expose the service role key to the frontend.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


class SupabaseImageStore:
    """
    Blocking Storage calls; services run them in a worker thread.
    """

    def __init__(self, bucket: str = BUCKET):
        self.bucket = bucket

    def _bucket(self):
        return supabase_admin().storage.from_(self.bucket)

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """
        Upload (or overwrite) `path` inside the bucket and return its public URL.

        Example path: "products/<uuid>/image.png"
        """
        bucket = self._bucket()
        bucket.upload(path, data, {"content-type": content_type, "upsert": "true"})
        return bucket.get_public_url(path)

    def path_from_url(self, url: str) -> str | None:
        """
        https://<proj>.supabase.co/storage/v1/object/public/assets/products/p/image.png
        -> 'products/p/image.png'

        None for URLs outside this bucket (e.g. external images).
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker) :]

    def delete_url(self, url: str) -> None:
        """Delete the object behind a public URL. No-op for foreign URLs."""
        path = self.path_from_url(url)
        if not path:
            return
        # Client expects a list of paths.
        self._bucket().remove([path])
        logger.info("Removed image %s from bucket %s", path, self.bucket)
