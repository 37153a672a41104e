"""Encode uploaded background images as data URIs."""

import asyncio
import base64
import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from floorplan.core.errors import ImageDecodeFailure

logger = logging.getLogger(__name__)


def _decode_mime_type(blob: bytes) -> str:
    """Decode the image header and return its MIME type."""
    try:
        with Image.open(io.BytesIO(blob)) as image:
            image.verify()
            image_format = image.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeFailure(f"Could not decode image: {e}") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ImageDecodeFailure(f"Unsupported image format: {image_format}")
    return mime_type


async def encode_background_image(blob: bytes, content_type: Optional[str] = None) -> str:
    """Turn an uploaded image into a ``data:`` URI.

    Args:
        blob: Raw file content.
        content_type: MIME type reported by the uploader, used for logging only;
            the decoded format decides the URI's type.

    Returns:
        str: ``data:<mime>;base64,<payload>``.

    Raises:
        ImageDecodeFailure: If the blob is empty or not a readable image.
    """
    if not blob:
        raise ImageDecodeFailure("Empty image upload")

    loop = asyncio.get_running_loop()
    mime_type = await loop.run_in_executor(None, _decode_mime_type, blob)

    if content_type and content_type != mime_type:
        logger.info(f"Upload declared {content_type} but decoded as {mime_type}")

    payload = base64.b64encode(blob).decode("ascii")
    logger.info(f"Encoded {len(blob)} byte {mime_type} background image")
    return f"data:{mime_type};base64,{payload}"
