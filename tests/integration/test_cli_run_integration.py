from __future__ import annotations

import re
from pathlib import Path

import pytest

from caneflow.cli import main as cli_main
from caneflow.excel.reader import read_sheet_rows
from caneflow.logging.init import reset_logging

"""Integration: CLI end to end with a config file and a real workbook."""

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def test_cli_convert_with_config(write_config: Path, caneco_xlsx: Path, capsys):
    code = cli_main(["convert", "data/carnet.xlsx", "--group-price", "4x10 | U1000 R2V=30"])
    out = capsys.readouterr().out

    assert code == 0
    m = re.search(r"SUMMARY rows=(\d+) headers=(yes|no) output=(.+) elapsed_sec=", out)
    assert m, out
    assert m.group(1) == "3"
    assert m.group(2) == "yes"
    assert Path(m.group(3)) == Path("data/carnet - MULTIDOC.xlsx")

    rows = read_sheet_rows(Path("data/carnet - MULTIDOC.xlsx"), "Export")
    # config: group price 10 for 3G2.5, command line: 30 for 4x10
    assert [r[4] for r in rows[1:]] == [10, 30, 10]
    assert [r[6] for r in rows[1:]] == [20, 20, 20]


def test_cli_preview_lists_groups(caneco_xlsx: Path, capsys):
    code = cli_main(["preview", str(caneco_xlsx)])
    out = capsys.readouterr().out

    assert code == 0
    assert "Groupes:" in out
    assert "  3G2.5 | U1000 R2V: 2" in out
    assert "  4x10 | U1000 R2V: 1" in out
    assert "SUMMARY preview rows=3 groups=2" in out


def test_cli_convert_missing_sheet(caneco_xlsx: Path, capsys):
    code = cli_main(["convert", str(caneco_xlsx), "--sheet", "Absent"])
    assert code == 1
    assert "ERROR Sheet not found: Absent" in capsys.readouterr().out
    assert not caneco_xlsx.with_name("carnet - MULTIDOC.xlsx").exists()
