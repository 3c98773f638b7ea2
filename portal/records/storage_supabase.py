"""
Supabase-backed file store for resumes.

Duck-typed like the record store adapter: the client is expected to expose
`.storage.from_(bucket)` (supabase client) or `.from_(bucket)` (storage3
client), returning an object that offers:

- upload(path, data, file_options) -> Any
- get_public_url(path) -> str | { publicURL | publicUrl | url }

Security:
- The caller must ensure the client is initialized with a server-side key.
- Object paths are namespaced by student id by the calling service.
"""
from __future__ import annotations

import logging
from typing import Any, Dict


logger = logging.getLogger("portal.records")


class SupabaseFileStore:
    """FileStore using a supabase client for Storage operations."""

    def __init__(self, client: Any):
        self._client = client

    # --- Helpers -----------------------------------------------------------------

    def _bucket(self, bucket: str) -> Any:
        """Return a bucket proxy from either supabase client or storage3 client."""
        c = self._client
        storage = getattr(c, "storage", None)
        if storage is not None and hasattr(storage, "from_"):
            return storage.from_(bucket)
        if hasattr(c, "from_"):
            return c.from_(bucket)
        raise RuntimeError("invalid_supabase_client")

    @staticmethod
    def _first_key(d: Dict[str, Any], *keys: str) -> Any:
        for k in keys:
            if k in d and d[k] is not None:
                return d[k]
        return None

    # --- Protocol methods --------------------------------------------------------

    def upload(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str:
        b = self._bucket(bucket)
        # storage3 expects keys relative to the bucket.
        norm_key = path.lstrip("/")
        prefix = f"{bucket}/"
        if norm_key.startswith(prefix):
            norm_key = norm_key[len(prefix):]
        try:
            b.upload(norm_key, data, {"content-type": content_type, "upsert": "true"})
        except Exception as exc:
            logger.warning("Resume upload failed: %s", exc.__class__.__name__)
            raise RuntimeError("upload_failed") from exc
        res = b.get_public_url(norm_key)
        url = res if isinstance(res, str) else None
        if url is None and isinstance(res, dict):
            url = self._first_key(res, "publicURL", "publicUrl", "url")
            data_field = res.get("data")
            if url is None and isinstance(data_field, dict):
                url = self._first_key(data_field, "publicURL", "publicUrl", "url")
        if not url:
            raise RuntimeError("public_url_missing")
        return str(url)


__all__ = ["SupabaseFileStore"]
