import io

import discord

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}


class ImageHandle:
    """
    An image downloaded into memory, ready to be attached to a message.
    The owner must call release() once the image is no longer displayed.
    """

    def __init__(self, data: bytes, content_type: str | None = None, stem: str = "avatar"):
        self._data: bytes | None = data
        self.content_type = content_type or "application/octet-stream"
        extension = _EXTENSIONS.get(self.content_type.split(";")[0].strip().lower(), "png")
        self.filename = f"{stem}.{extension}"

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def size(self) -> int:
        return 0 if self._data is None else len(self._data)

    @property
    def attachment_url(self) -> str:
        return f"attachment://{self.filename}"

    def read(self) -> bytes:
        if self._data is None:
            raise ValueError(f"Image {self.filename} has already been released")
        return self._data

    def as_file(self) -> discord.File:
        """Build a fresh discord.File, a File can only be sent once."""
        return discord.File(io.BytesIO(self.read()), filename=self.filename)

    def release(self) -> None:
        self._data = None

    def __repr__(self):
        state = "released" if self.released else f"{self.size} bytes"
        return f"<ImageHandle {self.filename} ({state})>"
