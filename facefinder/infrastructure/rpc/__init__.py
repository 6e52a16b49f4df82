from .client import RecordStoreClient

__all__ = ["RecordStoreClient"]
