from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path

import pytest

import inventory_io.cli.__main__ as cli_module
from inventory_io.cli.__main__ import EXIT_FATAL, EXIT_SUCCESS, EXIT_VALIDATION, main as cli_main
from inventory_io.db.store import StoreError

"""Exit code contract: 0 success, 1 fatal (config / store / IO), 2 validation."""


@pytest.fixture()
def offline_store(monkeypatch, fake_store):
    @contextmanager
    def fake_connection(cfg):
        yield None

    monkeypatch.setattr(cli_module, "_db_connection", fake_connection)
    monkeypatch.setattr(cli_module, "DeviceStore", lambda cur, tables: fake_store)
    return fake_store


def test_exit_code_values():
    assert (EXIT_SUCCESS, EXIT_FATAL, EXIT_VALIDATION) == (0, 1, 2)


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    assert cli_main(["export"]) == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_invalid_config(write_config: Path, capsys):
    write_config.write_text("database: [unclosed\n", encoding="utf-8")
    assert cli_main(["list"]) == 1
    assert "ERROR config: invalid yaml" in capsys.readouterr().out


def test_exit_code_success(write_config, write_csv, offline_store):
    p = write_csv("devices.csv", "asset_tag,serial_no\nA1,S1\n")
    assert cli_main(["import", str(p)]) == 0


def test_exit_code_validation(write_config, write_csv, offline_store):
    p = write_csv("devices.csv", "model\nT14\n")
    assert cli_main(["import", str(p)]) == 2
    assert offline_store.upsert_calls == []


def test_exit_code_connection_failure(write_config, write_csv, monkeypatch, capsys):
    @contextmanager
    def failing_connection(cfg):
        raise StoreError("connection failed: refused")
        yield  # pragma: no cover

    monkeypatch.setattr(cli_module, "_db_connection", failing_connection)
    p = write_csv("devices.csv", "asset_tag,serial_no\nA1,S1\n")
    assert cli_main(["import", str(p)]) == 1
    assert "ERROR import: connection failed: refused" in capsys.readouterr().out
