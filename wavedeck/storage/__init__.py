"""Storage layer for uploaded blobs and cover previews."""

from .blob_store import BlobStoreError, LocalBlobStore, extension_for
from .preview_store import PreviewStore

__all__ = [
    "BlobStoreError",
    "LocalBlobStore",
    "PreviewStore",
    "extension_for",
]
