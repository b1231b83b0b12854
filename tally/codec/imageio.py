"""PNG bytes <-> PIL images for carriers leaving or entering the app."""

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from tally.codec.errors import InvalidDataError


def to_png(image: Image.Image) -> bytes:
    """Lossless PNG encoding of a carrier."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def from_image_bytes(data: bytes) -> Image.Image:
    """
    Open image bytes (PNG, or any format Pillow reads) fully into memory.

    Raises:
        InvalidDataError: If the bytes are not a readable image
    """
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InvalidDataError(f"Not a readable image: {e}") from e
