from app.storage.base import StorageAdapter
from app.storage.factory import create_storage, get_storage
from app.storage.local import LocalStorageAdapter

__all__ = ["StorageAdapter", "LocalStorageAdapter", "create_storage", "get_storage"]
