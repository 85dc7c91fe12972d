"""
Check certificate render assets.

Loads settings, verifies the template and font, prints the template size
and renders a sample certificate to sample_certificate.png.

Usage:
    python scripts/check_assets.py
"""

from certify.core.config import get_settings
from certify.core.exceptions import ConfigError
from certify.schemas.layout import load_layout
from certify.services.render_service import CertificateRenderer


SAMPLE = {
    "name": "Ada Lovelace",
    "hours": "40",
    "position": "Intern",
    "startDate": "2024-01-01",
    "endDate": "2024-02-01",
    "certId": "HF-2024-0000",
}


def main() -> int:
    settings = get_settings()
    print(f"Template: {settings.TEMPLATE_PATH}")
    print(f"Font:     {settings.FONT_PATH or '(Pillow default)'}")
    print(f"Layout:   {settings.LAYOUT_PATH or '(built-in)'}")

    try:
        layout = load_layout(settings.LAYOUT_PATH)
        renderer = CertificateRenderer.load(settings.TEMPLATE_PATH, layout, font_path=settings.FONT_PATH)
    except ConfigError as e:
        print(f"❌ {e.message}")
        return 1

    width, height = renderer.size
    print(f"✅ Assets loaded, template is {width}x{height}")

    png = renderer.render(SAMPLE, settings.verification_url(SAMPLE["certId"]))
    with open("sample_certificate.png", "wb") as f:
        f.write(png)
    print(f"✅ Sample written to sample_certificate.png ({len(png)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
