"""
Render Service

Composites candidate fields onto the certificate template with Pillow.

The template and fonts are loaded once per batch by ``CertificateRenderer.load``;
``render`` is then called per record. Text is not wrapped or truncated, so a
long name may overlap neighbouring fields.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, Mapping, Optional

import qrcode
from PIL import Image, ImageDraw, ImageFont

from certify.core.exceptions import ConfigError
from certify.schemas.layout import CertificateLayout, FieldPlacement, resolve_point


logger = logging.getLogger(__name__)


class CertificateRenderer:
    """Draws certificates for one template/font/layout combination."""

    def __init__(
        self,
        template: Image.Image,
        layout: CertificateLayout,
        font_path: Optional[str] = None,
    ):
        self.template = template.convert("RGB")
        self.layout = layout
        self.font_path = font_path
        self._fonts: Dict[int, ImageFont.ImageFont] = {}

        # Resolve every size up front so a broken font fails the batch, not a record.
        for placement in layout.fields.values():
            self._font(placement.font_size)

    @classmethod
    def load(
        cls,
        template_path: str,
        layout: CertificateLayout,
        font_path: Optional[str] = None,
    ) -> "CertificateRenderer":
        """
        Load the template and font from disk.

        An empty ``font_path`` selects Pillow's bundled default font.

        Raises:
            ConfigError: If the template or font cannot be loaded.
        """
        if not template_path or not Path(template_path).is_file():
            raise ConfigError(f"Certificate template not found: {template_path}")
        if font_path and not Path(font_path).is_file():
            raise ConfigError(f"Certificate font not found: {font_path}")

        try:
            with Image.open(template_path) as img:
                img.load()
                template = img.copy()
        except OSError as e:
            raise ConfigError(f"Cannot read certificate template {template_path}: {e}") from e

        logger.info(f"Loaded template {template_path} ({template.width}x{template.height})")
        return cls(template, layout, font_path=font_path or None)

    @property
    def size(self):
        return self.template.size

    def _font(self, size: int) -> ImageFont.ImageFont:
        font = self._fonts.get(size)
        if font is None:
            if self.font_path:
                try:
                    font = ImageFont.truetype(self.font_path, size)
                except OSError as e:
                    raise ConfigError(f"Cannot load font {self.font_path}: {e}") from e
            else:
                font = ImageFont.load_default(size=size)
            self._fonts[size] = font
        return font

    def _draw_field(self, draw: ImageDraw.ImageDraw, placement: FieldPlacement, value: str) -> None:
        text = placement.text.format(value=value)
        if not text:
            return

        width, height = self.template.size
        x, y = resolve_point(placement.origin, placement.x, placement.y, width, height)
        font = self._font(placement.font_size)

        # (x, y) is the anchor on the text baseline
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        text_width = right - left
        if placement.align == "center":
            x -= text_width / 2
        elif placement.align == "right":
            x -= text_width
        y -= bottom

        draw.text((x, y), text, font=font, fill=placement.fill)

    def _paste_qr(self, canvas: Image.Image, url: str) -> None:
        placement = self.layout.qr
        qr = qrcode.QRCode(border=1)
        qr.add_data(url)
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        qr_img = qr_img.resize((placement.size, placement.size))

        x, y = resolve_point(placement.origin, placement.x, placement.y, canvas.width, canvas.height)
        canvas.paste(qr_img, (int(x), int(y)))

    def render_image(self, values: Mapping[str, str], verify_url: Optional[str] = None) -> Image.Image:
        """Return the composed certificate as a Pillow image."""
        canvas = self.template.copy()
        draw = ImageDraw.Draw(canvas)

        for field, placement in self.layout.fields.items():
            self._draw_field(draw, placement, str(values.get(field, "") or ""))

        if self.layout.qr is not None and verify_url:
            self._paste_qr(canvas, verify_url)

        return canvas

    def render(self, values: Mapping[str, str], verify_url: Optional[str] = None) -> bytes:
        """
        Render a certificate.

        Args:
            values: Field name -> text (name, hours, position, startDate, endDate, certId).
            verify_url: Encoded in the QR stamp when the layout has one.

        Returns:
            bytes: PNG-encoded image.
        """
        buffer = BytesIO()
        self.render_image(values, verify_url).save(buffer, format="PNG")
        return buffer.getvalue()
