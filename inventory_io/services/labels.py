from __future__ import annotations

import base64
import html
import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any

import qrcode

from ..models.config_models import LabelConfig
from ..models.device import Device
from .progress import ProgressTracker

"""Printable QR labels for selected devices.

Each label encodes the device asset tag. The sheet is a self-contained HTML
page (A4, grid of cards, PNG data URIs) that opens the print dialog on load.
"""

__all__ = [
    "LabelRequest",
    "select_labels",
    "qr_data_uri",
    "render_label_sheet",
    "write_label_sheet",
]

logger = logging.getLogger(__name__)

PAGE_STYLE = (
    "@page{size:A4;margin:10mm}"
    "body{font-family:ui-sans-serif,system-ui}"
    ".grid{display:grid;grid-template-columns:repeat(%d,1fr);gap:12px}"
    ".card{border:1px solid #ddd;padding:8px;text-align:center}"
    "img{width:100%%;height:auto}"
    "small{display:block;margin-top:6px}"
)


@dataclass(frozen=True)
class LabelRequest:
    device_id: Any
    asset_tag: str  # QR payload


def select_labels(devices: Iterable[Device], selected_ids: Collection[Any]) -> list[LabelRequest]:
    """Label requests for the selected devices, in device order."""
    wanted = {str(i) for i in selected_ids}
    return [
        LabelRequest(device_id=d.id, asset_tag=d.asset_tag)
        for d in devices
        if str(d.id) in wanted
    ]


def qr_data_uri(payload: str, box_size: int = 8, border: int = 1) -> str:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def render_label_sheet(requests: Iterable[LabelRequest], config: LabelConfig | None = None) -> str:
    cfg = config or LabelConfig()
    request_list = list(requests)
    cards: list[str] = []
    with ProgressTracker(len(request_list), description="Rendering labels", unit="label") as progress:
        for req in request_list:
            uri = qr_data_uri(req.asset_tag, box_size=cfg.box_size, border=cfg.border)
            tag = html.escape(req.asset_tag)
            cards.append(f'<div class="card"><img src="{uri}" alt="{tag}" /><small>{tag}</small></div>')
            progress.advance(req.asset_tag)
    return (
        '<!doctype html><html><head><meta charset="utf-8" />'
        f"<style>{PAGE_STYLE % cfg.columns}</style></head><body>"
        f'<div class="grid">{"".join(cards)}</div>'
        "<script>onload=()=>print()</script></body></html>"
    )


def write_label_sheet(path: Path, requests: Iterable[LabelRequest], config: LabelConfig | None = None) -> int:
    """Render and write the label sheet; returns the number of labels."""
    request_list = list(requests)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_label_sheet(request_list, config), encoding="utf-8")
    logger.info(f"wrote {len(request_list)} label(s) to {path}")
    return len(request_list)
