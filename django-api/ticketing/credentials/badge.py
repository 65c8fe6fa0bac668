"""Badge credential generator.

Renders a role-coloured PNG badge with a QR code pointing at the ticket,
and a single-page PDF wrapping the same image. Both files are written through
Django's default storage under MEDIA_ROOT.
"""

import io
from pathlib import Path

import qrcode
import structlog
from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage
from PIL import Image, ImageDraw, ImageFont

from ticketing.domain import CredentialRefs, Event, Member, Ticket

logger = structlog.get_logger(__name__)

BADGE_SIZE: tuple[int, int] = (600, 300)
QR_SIZE = 120

ROLE_COLORS: dict[str, tuple[int, int, int]] = {
    "user": (76, 175, 80),
    "volunteer": (33, 150, 243),
    "organizer": (244, 67, 54),
}
DEFAULT_COLOR = (0, 0, 0)


def _load_font(font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for path in ("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", "/System/Library/Fonts/Helvetica.ttc"):
        try:
            return ImageFont.truetype(path, font_size)
        except OSError:
            continue
    return ImageFont.load_default()


def render_qr_code(data: str) -> Image.Image:
    """Render `data` as a QR code image sized for the badge."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    return img.convert("RGB").resize((QR_SIZE, QR_SIZE))


def render_badge(member: Member, event: Event, ticket: Ticket, ticket_url: str) -> Image.Image:
    """Draw the badge image for a ticket holder."""
    img = Image.new("RGB", BADGE_SIZE, ROLE_COLORS.get(member.role, DEFAULT_COLOR))
    draw = ImageDraw.Draw(img)

    draw.text((20, 15), f"{member.role.upper()} BADGE", fill=(255, 255, 255), font=_load_font(24))
    draw.text((20, 70), member.name, fill=(0, 0, 0), font=_load_font(22))
    body = _load_font(16)
    draw.text((20, 110), f"Event: {event.name}", fill=(0, 0, 0), font=body)
    draw.text((20, 140), f"Ticket Type: {ticket.ticket_type.value}", fill=(0, 0, 0), font=body)
    draw.text((20, 170), f"Date: {event.starts_at:%a %b %d %Y}", fill=(0, 0, 0), font=body)

    img.paste(render_qr_code(ticket_url), (450, 80))
    return img


class BadgeCredentialGenerator:
    """Writes a PNG badge and its PDF for every booked ticket."""

    def __init__(self, ticket_url_template: str, storage: Storage | None = None) -> None:
        self._ticket_url_template = ticket_url_template
        self._storage = storage or default_storage

    def generate(self, member: Member, event: Event, ticket: Ticket) -> CredentialRefs:
        image = render_badge(member, event, ticket, self._ticket_url_template.format(ticket_id=ticket.id))
        folder = f"{member.role}s" if member.role in ROLE_COLORS else "others"
        stem = f"{member.id}_{ticket.id}"

        png = io.BytesIO()
        image.save(png, format="PNG")
        badge_path = self._save(f"badges/{folder}/{stem}.png", png.getvalue())

        pdf = io.BytesIO()
        image.save(pdf, format="PDF", resolution=100.0)
        try:
            badge_pdf_path = self._save(f"badges-pdf/{folder}/{stem}.pdf", pdf.getvalue())
        except Exception:
            self._storage.delete(badge_path)
            raise

        logger.info("badge_generated", ticket_id=str(ticket.id), badge=badge_path, badge_pdf=badge_pdf_path)
        return CredentialRefs(badge_path=badge_path, badge_pdf_path=badge_pdf_path)

    def discard(self, credentials: CredentialRefs) -> None:
        for path in (credentials.badge_path, credentials.badge_pdf_path):
            if self._storage.exists(path):
                self._storage.delete(path)
                logger.info("badge_deleted", path=path)

    def _save(self, path: str, data: bytes) -> str:
        return self._storage.save(path, ContentFile(data, name=Path(path).name))
