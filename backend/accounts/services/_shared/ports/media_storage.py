from __future__ import annotations

from typing import BinaryIO, Protocol


class MediaStorage(Protocol):
    """Stores uploaded files and hands back their public URL."""

    def save(self, stream: BinaryIO, *, filename: str, folder: str) -> str:
        """
        Persist ``stream`` as ``folder/filename``.

        :returns: Public URL of the stored file.
        """

    def delete(self, public_url: str) -> bool:
        """Remove a previously stored file. :returns: True if it existed."""
