"""Tests for background image encoding."""

import base64
import io

import pytest
from PIL import Image

from floorplan.core.errors import ImageDecodeFailure
from floorplan.services.image_intake import encode_background_image


@pytest.mark.asyncio
async def test_encode_png(png_bytes):
    """A PNG becomes a data URI carrying the original bytes."""
    result = await encode_background_image(png_bytes, "image/png")

    prefix = "data:image/png;base64,"
    assert result.startswith(prefix)
    assert base64.b64decode(result[len(prefix):]) == png_bytes


@pytest.mark.asyncio
async def test_encode_uses_decoded_format():
    """The URI type follows the decoded image, not the declared content type."""
    buffer = io.BytesIO()
    Image.new("RGB", (2, 2)).save(buffer, format="JPEG")

    result = await encode_background_image(buffer.getvalue(), "image/png")

    assert result.startswith("data:image/jpeg;base64,")


@pytest.mark.asyncio
async def test_encode_empty_blob():
    with pytest.raises(ImageDecodeFailure, match="Empty"):
        await encode_background_image(b"")


@pytest.mark.asyncio
async def test_encode_garbage():
    with pytest.raises(ImageDecodeFailure):
        await encode_background_image(b"definitely not an image", "image/png")


@pytest.mark.asyncio
async def test_encode_truncated_png(png_bytes):
    with pytest.raises(ImageDecodeFailure):
        await encode_background_image(png_bytes[:20], "image/png")
