# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

CANECO_HEADER = ["Amont", "Repère", "Longueur", "Câble", "Neutre", "PE ou PEN", "Type de câble"]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CANEFLOW_CONFIG", raising=False)
        monkeypatch.delenv("CANEFLOW_SOFFICE", raising=False)
        yield p


@pytest.fixture()
def caneco_rows() -> list[list[object]]:
    return [
        CANECO_HEADER,
        ["TGBT", "Q1", "12", "3G2.5", "", "6", "U1000 R2V"],
        ["TGBT", "Q2", "7,5", "4x10", "N 10", "PE 10", "U1000 R2V"],
        ["TD1", "Q3", 0, "3G1.5", "", "", "H07RN-F"],
        ["", "", "", "", "", "", ""],
        ["TD1", "Q4", 25, "3G2.5", "", "6", "U1000 R2V"],
        ["", "", "", "", "", "", ""],
    ]


def _make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def caneco_xlsx(temp_workdir: Path, caneco_rows: list[list[object]]) -> Path:
    return _make_excel(temp_workdir / "data" / "carnet.xlsx", {"Carnet": caneco_rows})


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input:
  sheet_name: Carnet
output:
  sheet_name: Export
  include_headers: true
pricing:
  mode: per_group
  default_unit: ml
  default_unit_price: "5"
  default_tva: 20
  unit_prices_by_type:
    "3G2.5 | U1000 R2V": 10
legacy:
  soffice_binary: libreoffice
  timeout_seconds: 30
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "caneflow.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
