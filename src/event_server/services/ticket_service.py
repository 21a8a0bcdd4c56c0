"""QR code tickets.

A ticket is a QR code encoding a compact JSON document that names the event
and, when known, the attendee.
"""

import base64
import io
import json

import qrcode

from ..models.event import Event
from ..models.user import User


def build_ticket_payload(event: Event, user: User | None = None) -> str:
    """Serialize the ticket contents.

    Args:
        event: Event the ticket admits to
        user: Attendee, when the ticket is personal

    Returns:
        str: Compact JSON with stable key order
    """
    payload: dict[str, object] = {
        "event_id": event.id,
        "title": event.title,
        "event_date": event.event_date.isoformat(),
    }
    if user is not None:
        payload["user_id"] = user.id
        payload["username"] = user.username
    return json.dumps(payload, separators=(",", ":"), sort_keys=True)


def render_qr_png(text: str) -> bytes:
    """Render text as a QR code PNG."""
    qr = qrcode.QRCode(box_size=10, border=2)
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr_base64(text: str) -> str:
    """Render text as a QR code PNG, base64 encoded."""
    return base64.b64encode(render_qr_png(text)).decode("ascii")
