"""
Image Loading for Document Export
=================================

Fetches gallery and inline images, normalizes them to formats python-docx and
python-pptx can embed, and probes their pixel size.

Every failure here is per-image: it is logged and reported as ``None`` so the
caller can omit that image and carry on with the export.
"""
import asyncio
import base64
import binascii
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from io import BytesIO
from typing import AsyncIterator, List, Optional, Sequence, Tuple
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError

from report_portal.core.config import settings
from report_portal.core.logging_config import logger

# Formats both python-docx and python-pptx embed as-is
EMBEDDABLE_FORMATS = {"PNG", "JPEG", "GIF", "BMP", "TIFF"}

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<payload>.*)$", re.DOTALL)


@dataclass
class LoadedImage:
    """Embeddable image bytes plus pixel size (None when the probe timed out)"""
    data: bytes
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def has_size(self) -> bool:
        return bool(self.width and self.height)

    @property
    def aspect_ratio(self) -> float:
        """width / height; 4:3 when the size is unknown"""
        if self.has_size:
            return self.width / self.height
        return 4 / 3

    def stream(self) -> BytesIO:
        return BytesIO(self.data)


def decode_data_uri(uri: str) -> Optional[bytes]:
    match = _DATA_URI.match(uri.strip())
    if not match:
        return None
    payload = match.group("payload")
    if ";base64" in match.group("params").lower():
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError):
            return None
    return unquote_to_bytes(payload)


def normalize_image(data: bytes) -> Tuple[bytes, int, int]:
    """
    Open ``data`` with Pillow, re-encoding to PNG when the format cannot be
    embedded (WebP, SVG rasters, ICO, ...).

    Raises:
        UnidentifiedImageError / OSError when the bytes are not an image
    """
    with Image.open(BytesIO(data)) as img:
        img.load()
        width, height = img.size
        if img.format in EMBEDDABLE_FORMATS:
            return data, width, height

        if img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
            img = img.convert("RGBA")
        buffer = BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue(), width, height


class ImageLoader:
    """
    Loads export images over HTTP (or from data: URIs).

    Pass ``client`` to share one httpx.AsyncClient (tests inject one built on
    ``httpx.MockTransport``); otherwise a client is opened per call.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        fetch_timeout: Optional[float] = None,
        probe_timeout: Optional[float] = None,
        max_bytes: Optional[int] = None
    ):
        self._client = client
        self.fetch_timeout = fetch_timeout if fetch_timeout is not None else settings.IMAGE_FETCH_TIMEOUT
        self.probe_timeout = probe_timeout if probe_timeout is not None else settings.IMAGE_PROBE_TIMEOUT
        self.max_bytes = max_bytes if max_bytes is not None else settings.IMAGE_MAX_BYTES

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.fetch_timeout, follow_redirects=True) as client:
            yield client

    async def fetch(self, url: str, client: Optional[httpx.AsyncClient] = None) -> Optional[bytes]:
        """Raw bytes of ``url`` or None on any failure"""
        if not url:
            return None

        if url.startswith("data:"):
            data = decode_data_uri(url)
            if data is None:
                logger.warning("[ImageLoader] Malformed data: URI skipped")
            elif len(data) > self.max_bytes:
                logger.warning(f"[ImageLoader] Embedded image over {self.max_bytes} bytes skipped")
                return None
            return data

        try:
            if client is None:
                async with self._session() as session:
                    response = await session.get(url, timeout=self.fetch_timeout)
            else:
                response = await client.get(url, timeout=self.fetch_timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"[ImageLoader] Fetch failed for {url}: {type(e).__name__}: {e}")
            return None

        data = response.content
        if len(data) > self.max_bytes:
            logger.warning(f"[ImageLoader] {url} is {len(data)} bytes, over the {self.max_bytes} limit")
            return None
        return data

    async def load(self, url: str, client: Optional[httpx.AsyncClient] = None) -> Optional[LoadedImage]:
        """
        Fetch and normalize one image.

        The decode runs in a worker thread bounded by ``probe_timeout``; on
        timeout the raw bytes come back with an unknown size.
        """
        data = await self.fetch(url, client)
        if not data:
            return None

        loop = asyncio.get_running_loop()
        try:
            embeddable, width, height = await asyncio.wait_for(
                loop.run_in_executor(None, normalize_image, data),
                timeout=self.probe_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"[ImageLoader] Size probe timed out for {url[:80]}, using 4:3")
            return LoadedImage(data=data)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning(f"[ImageLoader] Could not decode image {url[:80]}: {e}")
            return None

        return LoadedImage(data=embeddable, width=width, height=height)

    async def load_many(self, urls: Sequence[str]) -> List[Optional[LoadedImage]]:
        """Load concurrently; results are index-aligned with ``urls``"""
        if not urls:
            return []
        async with self._session() as client:
            return list(await asyncio.gather(*(self.load(url, client) for url in urls)))
