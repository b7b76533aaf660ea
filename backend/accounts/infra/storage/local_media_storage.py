from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO

from accounts.services._shared.ports import MediaStorage


class LocalMediaStorage(MediaStorage):
    """
    Stores files below ``root`` on the local filesystem.

    :param root: Directory that holds every stored file.
    :param url_prefix: Public URL prefix the files are served under.
    """

    def __init__(self, root: str | Path, url_prefix: str) -> None:
        self.root = Path(root).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")

    def _resolve(self, relative: str) -> Path:
        target = (self.root / relative).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError("Path escapes the media root.")
        return target

    def save(self, stream: BinaryIO, *, filename: str, folder: str) -> str:
        relative = f"{folder.strip('/')}/{filename}"
        target = self._resolve(relative)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as fh:
            shutil.copyfileobj(stream, fh)
        return f"{self.url_prefix}/{relative}"

    def delete(self, public_url: str) -> bool:
        if not public_url or not public_url.startswith(self.url_prefix + "/"):
            return False
        target = self._resolve(public_url[len(self.url_prefix) + 1 :])
        if not target.is_file():
            return False
        target.unlink()
        return True
