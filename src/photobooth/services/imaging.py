"""Pillow-based image inspection and decoration."""

import io
from dataclasses import dataclass

from PIL import Image, ImageOps

from photobooth.domain.errors import ValidationError

LANDSCAPE_TARGET = (1248, 832)
PORTRAIT_TARGET = (832, 1248)


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height


def read_size(data: bytes) -> ImageSize:
    """Return the EXIF-corrected dimensions of an encoded image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            width, height = img.size
    except (OSError, ValueError) as exc:
        raise ValidationError(
            "Image could not be decoded", code="INVALID_FILE_CONTENT"
        ) from exc
    return ImageSize(width=width, height=height)


@dataclass
class ImageDecorator:
    """Frames generated photos with a white border or the event logo."""

    border_width: int = 7
    logo_size: tuple[int, int] = (180, 180)
    quality: int = 90

    def add_border(self, data: bytes) -> bytes:
        """Return the image as JPEG inside a white frame."""
        with Image.open(io.BytesIO(data)) as img:
            framed = ImageOps.expand(
                img.convert("RGB"), border=self.border_width, fill="white"
            )
            return self._encode(framed)

    def merge_logo(self, data: bytes, logo: bytes) -> bytes:
        """Resize to the generation frame, add a border and stamp the logo.

        The logo sits in the bottom-right corner inside the border.
        """
        with Image.open(io.BytesIO(data)) as img, Image.open(io.BytesIO(logo)) as mark:
            main = img.convert("RGB")
            target = LANDSCAPE_TARGET if main.width >= main.height else PORTRAIT_TARGET
            if main.size != target:
                main = main.resize(target, Image.Resampling.LANCZOS)

            stamp = mark.convert("RGBA")
            stamp.thumbnail(self.logo_size, Image.Resampling.LANCZOS)

            canvas = Image.new(
                "RGB",
                (target[0] + self.border_width * 2, target[1] + self.border_width * 2),
                "white",
            )
            canvas.paste(main, (self.border_width, self.border_width))
            logo_x = canvas.width - self.logo_size[0] - self.border_width
            logo_y = canvas.height - self.logo_size[1] - self.border_width
            canvas.paste(stamp, (logo_x, logo_y), stamp)
            return self._encode(canvas)

    def _encode(self, img: Image.Image) -> bytes:
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=self.quality)
        return buffer.getvalue()
