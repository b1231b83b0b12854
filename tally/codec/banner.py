"""
Title/date banner drawn on exported images.

The banner is decoration only: it never carries payload bits.
"""

from datetime import date, datetime
from typing import Optional

from PIL import Image, ImageDraw, ImageFont


WHITE = (255, 255, 255, 255)
INK = (33, 37, 41, 255)
MUTED = (108, 117, 125, 255)


def format_export_date(exported_at: date) -> str:
    """'Exported Mar 09, 2025'"""
    return f"Exported {exported_at.strftime('%b %d, %Y')}"


class BannerRenderer:
    """Renders the "CATEGORY TALLY" header strip."""

    def __init__(
        self,
        title: str = "CATEGORY TALLY",
        height: int = 48,
        background: tuple[int, int, int, int] = WHITE,
    ):
        self.title = title
        self.height = height
        self.background = background
        self._font = ImageFont.load_default()

    def render(
        self,
        width: int,
        height: Optional[int] = None,
        exported_at: Optional[date] = None,
    ) -> Image.Image:
        """
        Draw the banner as a standalone RGBA strip.

        The title sits in the upper half, the export date in the lower half.
        Text that does not fit is clipped by the strip edges.
        """
        height = self.height if height is None else height
        banner = Image.new("RGBA", (width, max(height, 0)), self.background)
        if width == 0 or height <= 0:
            return banner

        if exported_at is None:
            exported_at = datetime.now().date()

        draw = ImageDraw.Draw(banner)
        half = height // 2
        self._draw_centered(draw, self.title, width, 0, half, INK)
        self._draw_centered(draw, format_export_date(exported_at), width, half, height - half, MUTED)
        return banner

    def _draw_centered(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        width: int,
        top: int,
        band: int,
        fill: tuple[int, int, int, int],
    ) -> None:
        left, upper, right, lower = draw.textbbox((0, 0), text, font=self._font)
        x = (width - (right - left)) // 2 - left
        y = top + (band - (lower - upper)) // 2 - upper
        draw.text((x, y), text, font=self._font, fill=fill)
