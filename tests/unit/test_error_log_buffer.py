from __future__ import annotations
import json
from pathlib import Path
from inventory_io.logging.error_log import ErrorLogBuffer, ErrorRecord

FIELDS = {"timestamp", "file", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="devices.csv",
        row=10,
        error_type="MISSING_REQUIRED_FIELD",
        message="missing serial number",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "devices.csv"
    assert data["row"] == 10
    assert data["error_type"] == "MISSING_REQUIRED_FIELD"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == FIELDS


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("อุปกรณ์.csv", -1, "MISSING_REQUIRED_FIELD", "แผนก")
    assert "อุปกรณ์.csv" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("f1.csv", 1, "MISSING_REQUIRED_FIELD", "missing asset tag"))
    buf.append(ErrorRecord.create("f1.csv", 2, "MISSING_REQUIRED_FIELD", "missing serial number"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == FIELDS
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "errors")
    assert buf.flush() is None
    assert not (tmp_path / "errors").exists()


def test_error_log_buffer_multiple_flushes_append(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("f.csv", 1, "MISSING_REQUIRED_FIELD", "a"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.csv", 2, "MISSING_REQUIRED_FIELD", "b"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
