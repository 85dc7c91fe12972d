"""
Certificate Layout

Table of field -> (x, y, font size, alignment) used by the renderer.
Coordinates are offsets from an origin on the template canvas, so one
layout fits any template size with the same composition.
"""

import json
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from certify.core.exceptions import ConfigError


Origin = Literal["top_left", "top_right", "center", "bottom_left", "bottom_right"]


def resolve_point(origin: str, x: float, y: float, width: int, height: int) -> Tuple[float, float]:
    """Translate an (x, y) offset relative to ``origin`` into canvas pixels."""
    if origin == "center":
        return width / 2 + x, height / 2 + y
    if origin == "top_right":
        return width + x, y
    if origin == "bottom_left":
        return x, height + y
    if origin == "bottom_right":
        return width + x, height + y
    return x, y


class FieldPlacement(BaseModel):
    """Where and how one text field is drawn."""

    x: float = 0
    y: float = 0
    font_size: int = Field(40, gt=0)
    align: Literal["left", "center", "right"] = "center"
    origin: Origin = "center"
    fill: str = "#000000"
    text: str = Field("{value}", description="Format string; {value} is the field value")


class QRPlacement(BaseModel):
    """Optional verification QR code stamp."""

    x: float = 0
    y: float = 0
    size: int = Field(200, gt=0)
    origin: Origin = "top_left"


class CertificateLayout(BaseModel):
    """Complete layout for one template."""

    fields: Dict[str, FieldPlacement]
    qr: Optional[QRPlacement] = None


def default_layout() -> CertificateLayout:
    """Layout matching the stock High Furries template."""
    return CertificateLayout(
        fields={
            "name": FieldPlacement(x=0, y=-50, font_size=80),
            "hours": FieldPlacement(x=-200, y=100, font_size=50),
            "position": FieldPlacement(x=400, y=100, font_size=50),
            "startDate": FieldPlacement(x=-150, y=250, font_size=50),
            "endDate": FieldPlacement(x=250, y=250, font_size=50),
            "certId": FieldPlacement(
                x=-50, y=60, font_size=30, align="right", origin="top_right", text="ID: {value}"
            ),
        },
    )


def load_layout(path: str = "") -> CertificateLayout:
    """
    Load a layout from a JSON file, or the default layout when no path is set.

    Raises:
        ConfigError: If the file is missing or does not describe a layout.
    """
    if not path:
        return default_layout()

    layout_file = Path(path)
    if not layout_file.is_file():
        raise ConfigError(f"Layout file not found: {path}")

    try:
        data = json.loads(layout_file.read_text(encoding="utf-8"))
        return CertificateLayout.model_validate(data)
    except (ValueError, PydanticValidationError) as e:
        raise ConfigError(f"Invalid layout file {path}: {e}") from e
