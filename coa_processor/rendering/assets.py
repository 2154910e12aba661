"""Logo and header image loading.

References arrive from branding profiles as an HTTP(S) URL, a base64
``data:image/...`` URI, raw base64 text or raw bytes. Pixel dimensions are
read straight from the PNG, JPEG and GIF headers so no image codec is needed
before placement.
"""

import base64
import binascii
import re
import struct

import httpx

from coa_processor.logging.logger import Log
from coa_processor.rendering.exceptions import AssetError
from coa_processor.rendering.models import ResolvedAsset

DEFAULT_ASSET_SIZE = (100, 70)

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_JPEG_SIGNATURE = b"\xff\xd8\xff"
_GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
_DATA_URI_RE = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

# SOF0..SOF15 minus DHT (C4), JPG (C8) and DAC (CC)
_JPEG_SOF_MARKERS = frozenset(range(0xC0, 0xD0)) - {0xC4, 0xC8, 0xCC}
# markers that carry no length field
_JPEG_STANDALONE_MARKERS = frozenset({0x01, *range(0xD0, 0xDA)})


def image_dimensions(data: bytes) -> tuple[int, int] | None:
    """Return ``(width, height)`` from the image header, or None if unknown."""
    try:
        if data.startswith(_PNG_SIGNATURE):
            width, height = struct.unpack(">II", data[16:24])
        elif data.startswith(_JPEG_SIGNATURE):
            size = _jpeg_dimensions(data)
            if size is None:
                return None
            width, height = size
        elif data[:6] in _GIF_SIGNATURES:
            width, height = struct.unpack("<HH", data[6:10])
        else:
            return None
    except struct.error:
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height


def _jpeg_dimensions(data: bytes) -> tuple[int, int] | None:
    offset = 2
    length = len(data)
    while offset + 1 < length:
        if data[offset] != 0xFF:
            offset += 1
            continue
        marker = data[offset + 1]
        if marker == 0xFF:
            # fill byte
            offset += 1
            continue
        if marker in _JPEG_STANDALONE_MARKERS:
            offset += 2
            continue
        if marker in _JPEG_SOF_MARKERS:
            height, width = struct.unpack(">HH", data[offset + 5 : offset + 9])
            return width, height
        if marker == 0xDA:
            # start of scan: no frame header before entropy-coded data
            return None
        (segment_length,) = struct.unpack(">H", data[offset + 2 : offset + 4])
        offset += 2 + segment_length
    return None


def scale_to_fit(
    orig_width: float,
    orig_height: float,
    max_width: float,
    max_height: float,
    *,
    upscale: bool = False,
) -> tuple[float, float]:
    """Largest undistorted box that fits ``max_width`` x ``max_height``.

    Clamps to the width first, then to the height if it still overflows.
    With ``upscale`` the box is first grown to the full width.
    """
    if orig_width <= 0 or orig_height <= 0:
        orig_width, orig_height = DEFAULT_ASSET_SIZE
    width, height = float(orig_width), float(orig_height)
    if width > max_width or upscale:
        height = height * max_width / width
        width = float(max_width)
    if height > max_height:
        width = width * max_height / height
        height = float(max_height)
    return width, height


class AssetResolver:
    """Turns an asset reference into bytes plus pixel dimensions.

    Failures never propagate: an unreachable URL, a timeout or undecodable
    base64 all resolve to ``None`` and the caller renders without the asset.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 5.0,
        max_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._http_client = http_client
        self._timeout_seconds = timeout_seconds
        self._max_bytes = max_bytes

    def resolve(self, ref: str | bytes | None) -> ResolvedAsset | None:
        if not ref:
            return None
        try:
            data = self._load_bytes(ref)
        except AssetError as exc:
            Log.warning(f"Asset dropped: {exc}")
            return None
        if not data:
            return None

        size = image_dimensions(data)
        if size is None:
            Log.warning("Unknown image format, using default asset box")
            size = DEFAULT_ASSET_SIZE
        width, height = size
        Log.debug(f"Resolved asset {width}x{height} ({len(data)} bytes)")
        return ResolvedAsset(data=data, width=width, height=height)

    def _load_bytes(self, ref: str | bytes) -> bytes:
        if isinstance(ref, bytes):
            if image_dimensions(ref) is not None or ref.startswith(_JPEG_SIGNATURE):
                return ref
            try:
                ref = ref.decode("ascii")
            except UnicodeDecodeError as exc:
                raise AssetError("binary asset has no known image signature") from exc

        ref = ref.strip()
        if ref.startswith(("http://", "https://")):
            return self._fetch(ref)
        match = _DATA_URI_RE.match(ref)
        if match:
            return self._decode_base64(ref[match.end() :])
        if ref.startswith("data:"):
            raise AssetError("data URI is not a base64 image")
        return self._decode_base64(ref)

    def _decode_base64(self, payload: str) -> bytes:
        compact = "".join(payload.split())
        try:
            data = base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetError(f"invalid base64 payload: {exc}") from exc
        if len(data) > self._max_bytes:
            raise AssetError(f"inline asset exceeds {self._max_bytes} bytes")
        return data

    def _fetch(self, url: str) -> bytes:
        Log.info(f"Fetching asset from {url}")
        try:
            if self._http_client is not None:
                return self._read_capped(self._http_client, url)
            with httpx.Client(
                timeout=self._timeout_seconds,
                follow_redirects=True,
            ) as client:
                return self._read_capped(client, url)
        except httpx.HTTPError as exc:
            raise AssetError(f"fetch failed for {url}: {exc}") from exc

    def _read_capped(self, client: httpx.Client, url: str) -> bytes:
        """Stream the body, giving up as soon as it passes ``max_bytes``."""
        with client.stream("GET", url, timeout=self._timeout_seconds) as response:
            response.raise_for_status()
            declared = response.headers.get("Content-Length")
            if declared is not None and declared.isdigit() and int(declared) > self._max_bytes:
                raise AssetError(f"asset at {url} declares {declared} bytes, limit {self._max_bytes}")
            buffer = bytearray()
            for chunk in response.iter_bytes():
                buffer.extend(chunk)
                if len(buffer) > self._max_bytes:
                    raise AssetError(f"asset at {url} exceeds {self._max_bytes} bytes")
        return bytes(buffer)
