from .local_media_storage import LocalMediaStorage

__all__ = ["LocalMediaStorage"]
