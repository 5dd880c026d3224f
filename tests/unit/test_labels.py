from __future__ import annotations

import base64
from pathlib import Path
from unittest.mock import patch

from inventory_io.models.config_models import LabelConfig
from inventory_io.models.device import Device
from inventory_io.services.labels import (
    LabelRequest,
    qr_data_uri,
    render_label_sheet,
    select_labels,
    write_label_sheet,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _devices():
    return [
        Device(id="u1", asset_tag="A1", serial_no="S1", status="active"),
        Device(id="u2", asset_tag="A2", serial_no="S2", status="active"),
        Device(id=3, asset_tag="A3", serial_no="S3", status="lost"),
    ]


def test_select_labels_keeps_device_order():
    requests = select_labels(_devices(), ["3", "u1"])
    assert requests == [LabelRequest(device_id="u1", asset_tag="A1"), LabelRequest(device_id=3, asset_tag="A3")]


def test_select_labels_nothing_selected():
    assert select_labels(_devices(), []) == []


def test_qr_data_uri_is_png():
    uri = qr_data_uri("A1", box_size=2, border=1)
    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(PNG_MAGIC)


def test_render_label_sheet_one_card_per_request():
    with patch("inventory_io.services.labels.qr_data_uri", return_value="data:image/png;base64,AAAA") as mock_qr:
        html = render_label_sheet(
            [LabelRequest("u1", "A1"), LabelRequest("u2", "<A&2>")],
            LabelConfig(box_size=3, border=2, columns=4),
        )
    assert mock_qr.call_count == 2
    mock_qr.assert_any_call("A1", box_size=3, border=2)
    assert html.count('<div class="card">') == 2
    assert "<small>&lt;A&amp;2&gt;</small>" in html
    assert "repeat(4,1fr)" in html
    assert "width:100%" in html
    assert "onload=()=>print()" in html


def test_write_label_sheet(tmp_path: Path):
    target = tmp_path / "labels.html"
    count = write_label_sheet(target, [LabelRequest("u1", "A1")], LabelConfig(box_size=2))
    assert count == 1
    text = target.read_text(encoding="utf-8")
    assert text.startswith("<!doctype html>")
    assert "data:image/png;base64," in text
