"""
Image Store - one image file per screen under the data root.

Handles:
- Content-Type to extension selection (png or jpg)
- Removal of the stale file of the other extension before writing
- Serving stored images by screen id
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

import aiofiles
import aiofiles.os

from trmnl_byos.exceptions import (
    ImageNotFoundError,
    ImageStorageError,
    InvalidContentTypeError,
    InvalidScreenIdError,
)
from trmnl_byos.store import ScreenRegistry, normalize_screen_id

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"

# Lookup order for serve() without an explicit extension
EXTENSIONS = ("jpg", "png")

MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "png": "image/png",
}


def extension_for(content_type: Optional[str]) -> str:
    """
    Pick the file extension for an upload.

    `image/png` maps to png; any other type, including a missing one, is
    stored as jpg. The bytes themselves are not inspected.
    """
    if content_type is None:
        return "jpg"
    media_type = content_type.split(";", 1)[0].strip().lower()
    return "png" if media_type == "image/png" else "jpg"


def media_type_for(extension: str) -> str:
    return MEDIA_TYPES[extension]


def image_path_for(screen_id: str, extension: str) -> str:
    """Relative URL path under which an image is served."""
    return f"/screens/{screen_id}.{extension}"


def _check_screen_id(screen_id: str) -> None:
    if (
        not screen_id
        or screen_id in (".", "..")
        or any(c in screen_id for c in ("/", "\\", "\x00"))
    ):
        raise InvalidScreenIdError(screen_id)


class ImageStore:
    """Filesystem-backed image storage, kept consistent with the registry."""

    def __init__(self, data_root: str, registry: ScreenRegistry):
        """
        Initialize the image store.

        Args:
            data_root: Directory for the image files. See `ensure_data_root`.
            registry: Registry updated after each successful upload.
        """
        self.data_root = Path(data_root)
        self.registry = registry
        self._locks: Dict[str, asyncio.Lock] = {}

    def ensure_data_root(self) -> None:
        """Create the data root directory if it does not exist."""
        self.data_root.mkdir(parents=True, exist_ok=True)

    def path_for(self, screen_id: str, extension: str) -> Path:
        return self.data_root / f"{screen_id}.{extension}"

    def _lock_for(self, screen_id: str) -> asyncio.Lock:
        return self._locks.setdefault(screen_id, asyncio.Lock())

    async def store(
        self, device_id: str, content_type: Optional[str], data: bytes
    ) -> str:
        """
        Store an uploaded image and point the screen record at it.

        Steps, serialized per screen id:
        1. Delete the file with the other extension, if any
        2. Overwrite {data_root}/{screen_id}.{ext}
        3. Update the registry entry (image_path, last_updated)

        Args:
            device_id: Device or screen id; normalized to lower case.
            content_type: Declared Content-Type of the body. Defaults to image/jpeg.
            data: Raw image bytes.

        Returns:
            The relative image path, /screens/{screen_id}.{ext}

        Raises:
            InvalidContentTypeError: content_type is not image/*. Nothing is touched.
            InvalidScreenIdError: the id cannot be used as a file name.
            ImageStorageError: deleting the stale file or writing failed.
        """
        content_type = content_type or DEFAULT_CONTENT_TYPE
        if not content_type.lower().startswith("image/"):
            raise InvalidContentTypeError(content_type)

        screen_id = normalize_screen_id(device_id)
        _check_screen_id(screen_id)

        extension = extension_for(content_type)
        stale_extension = "png" if extension == "jpg" else "jpg"
        target = self.path_for(screen_id, extension)
        stale = self.path_for(screen_id, stale_extension)
        image_path = image_path_for(screen_id, extension)

        async with self._lock_for(screen_id):
            await self._remove_stale(stale)

            try:
                async with aiofiles.open(target, "wb") as f:
                    await f.write(data)
            except OSError as e:
                logger.exception(f"Failed to write image {target}")
                raise ImageStorageError(context={"path": str(target)}) from e

            now = datetime.now(timezone.utc)
            self.registry.update(
                screen_id,
                lambda screen: screen.model_copy(
                    update={"image_path": image_path, "last_updated": now}
                ),
            )

        logger.info(f"Stored {len(data)} bytes for screen {screen_id} at {target}")
        return image_path

    async def _remove_stale(self, stale: Path) -> None:
        if not await aiofiles.os.path.exists(stale):
            return
        try:
            await aiofiles.os.remove(stale)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.exception(f"Failed to remove stale image {stale}")
            raise ImageStorageError(context={"path": str(stale)}) from e
        logger.info(f"Removed stale image {stale}")

    async def serve(
        self, device_id: str, extension: Optional[str] = None
    ) -> Tuple[bytes, str]:
        """
        Read a stored image.

        Looks only at the filesystem, so it works for screens the registry
        has never seen.

        Args:
            device_id: Device or screen id; normalized to lower case.
            extension: "jpg" or "png" to look up only that file. When None,
                jpg is tried first, then png.

        Returns:
            Tuple of (image bytes, media type)

        Raises:
            ImageNotFoundError: no matching file exists.
            ImageStorageError: the file exists but could not be read.
        """
        screen_id = normalize_screen_id(device_id)
        _check_screen_id(screen_id)

        candidates = (extension,) if extension else EXTENSIONS
        for ext in candidates:
            if ext not in MEDIA_TYPES:
                continue
            path = self.path_for(screen_id, ext)
            if not await aiofiles.os.path.exists(path):
                continue
            try:
                async with aiofiles.open(path, "rb") as f:
                    data = await f.read()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.exception(f"Failed to read image {path}")
                raise ImageStorageError(context={"path": str(path)}) from e
            return data, media_type_for(ext)

        raise ImageNotFoundError(screen_id, extension)
