"""
Image header utilities used by the fetch clients.

Only the header is read: pixel data is never decoded here.
"""
import logging
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger("sprite_preloader")


def describe_image(image_bytes: bytes) -> Tuple[int, int, Optional[str]]:
    """
    Read width, height, and MIME type from image bytes.

    Raises:
        ValueError: If the bytes are not a recognizable image
    """
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            width, height = image.size
            content_type = Image.MIME.get(image.format) if image.format else None
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Failed to decode image: {e}") from e
    logger.debug(f"ImageInfo dims={width}x{height} content_type={content_type}")
    return width, height, content_type
