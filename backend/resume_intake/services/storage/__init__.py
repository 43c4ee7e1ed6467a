from .file_storage import StorageClient, StoredFile, key_from_url

__all__ = ["StorageClient", "StoredFile", "key_from_url"]
