from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from caneflow.config.loader import LegacyConfig
from caneflow.core.mapper import EXPORT_HEADER
from caneflow.models.conversion import ConversionRequest
from caneflow.models.export_options import PriceMode
from caneflow.services.converter import (
    ConversionError,
    build_default_output_path,
    convert_file,
    export_options_for,
    normalize_output_path,
    preview_file,
)

SHEET = [
    ["Amont", "Repere", "Longueur", "Cable", "Neutre", "PE ou PEN", "Type de cable"],
    ["TGBT", "Q1", "12", "3G2.5", "", "6", "U1000 R2V"],
    ["TGBT", "Q2", 4, "4x10", "", "", ""],
]


def test_build_default_output_path():
    assert build_default_output_path(Path("/data/carnet.xls")) == Path(
        "/data/carnet - MULTIDOC.xlsx"
    )
    assert build_default_output_path(Path("carnet.v2.xlsx")) == Path("carnet.v2 - MULTIDOC.xlsx")


@pytest.mark.parametrize(
    "given, expected",
    [
        ("/out/export", "/out/export.xlsx"),
        ("/out/export.csv", "/out/export.xlsx"),
        ("/out/export.xlsx", "/out/export.xlsx"),
        ("/out/EXPORT.XLSX", "/out/EXPORT.XLSX"),
    ],
)
def test_normalize_output_path(given: str, expected: str):
    assert normalize_output_path(Path(given)) == Path(expected)


def test_export_options_per_group_only_forwards_group_prices():
    request = ConversionRequest(
        input_path=Path("in.xlsx"),
        price_mode=PriceMode.PER_GROUP,
        unit_prices=["1"],
        unit_prices_by_type={"A": "2"},
        default_unit_price="3",
        default_tva="20",
        default_unit="u",
        include_headers=False,
    )
    options = export_options_for(request)
    assert options.unit_prices is None
    assert options.unit_prices_by_type == {"A": "2"}
    assert options.default_unit_price == "3"
    assert options.default_tva == "20"
    assert options.default_unit == "u"
    assert options.include_headers is False


def test_export_options_per_line_only_forwards_line_prices():
    request = ConversionRequest(
        input_path=Path("in.xlsx"),
        price_mode=PriceMode.PER_LINE,
        unit_prices=["1"],
        unit_prices_by_type={"A": "2"},
    )
    options = export_options_for(request)
    assert options.unit_prices == ["1"]
    assert options.unit_prices_by_type is None


@pytest.mark.parametrize("missing", [None, "", "   "])
def test_missing_input_path(missing):
    with pytest.raises(ConversionError) as e:
        preview_file(missing)
    assert "inputPath is required" in str(e.value)
    with pytest.raises(ConversionError):
        convert_file(ConversionRequest(input_path=missing))  # type: ignore[arg-type]


def test_preview_file_uses_reader_and_transform():
    with patch("caneflow.services.converter.read_sheet_rows", return_value=SHEET) as mock_read:
        items = preview_file(Path("in.xlsx"), "Carnet", legacy=LegacyConfig(soffice_binary="lo"))
    mock_read.assert_called_once_with(
        Path("in.xlsx"), "Carnet", soffice_binary="lo", timeout_seconds=120.0
    )
    assert [(i.line_number, i.repere, i.type_cable) for i in items] == [
        (1, "Q1", "3G2.5 | U1000 R2V"),
        (2, "Q2", "4x10"),
    ]


def test_convert_file_writes_multidoc_rows(tmp_path: Path):
    request = ConversionRequest(
        input_path=tmp_path / "carnet.xlsx",
        default_unit_price="10",
        default_tva="20",
        unit_prices_by_type={"4x10": "30,5"},
    )
    with patch("caneflow.services.converter.read_sheet_rows", return_value=SHEET), \
         patch("caneflow.services.converter.write_sheet_rows") as mock_write:
        result = convert_file(request)

    expected_path = tmp_path / "carnet - MULTIDOC.xlsx"
    assert result.output_path == expected_path
    assert result.row_count == 2
    path, sheet_name, rows = mock_write.call_args.args
    assert path == expected_path
    assert sheet_name == "Multidoc"
    assert rows[0] == list(EXPORT_HEADER)
    assert rows[1][0] == 1 and rows[1][3] == 12 and rows[1][4] == 10 and rows[1][6] == 20
    assert rows[2][0] == 2 and rows[2][3] == 4 and rows[2][4] == 30.5


def test_convert_file_without_headers_and_explicit_output(tmp_path: Path):
    request = ConversionRequest(
        input_path=tmp_path / "carnet.xlsx",
        output_path=tmp_path / "export.csv",
        include_headers=False,
        output_sheet_name="Feuil1",
    )
    with patch("caneflow.services.converter.read_sheet_rows", return_value=SHEET), \
         patch("caneflow.services.converter.write_sheet_rows") as mock_write:
        result = convert_file(request)

    assert result.output_path == tmp_path / "export.xlsx"
    assert result.row_count == 2
    path, sheet_name, rows = mock_write.call_args.args
    assert sheet_name == "Feuil1"
    assert len(rows) == 2
    assert rows[0][0] == 1


def test_convert_file_empty_sheet_counts_zero_rows(tmp_path: Path):
    request = ConversionRequest(input_path=tmp_path / "vide.xlsx")
    with patch("caneflow.services.converter.read_sheet_rows", return_value=[]), \
         patch("caneflow.services.converter.write_sheet_rows") as mock_write:
        result = convert_file(request)
    assert result.row_count == 0
    assert mock_write.call_args.args[2] == [list(EXPORT_HEADER)]


def test_convert_file_reports_progress(tmp_path: Path):
    events = []
    with patch("caneflow.services.converter.read_sheet_rows", return_value=SHEET), \
         patch("caneflow.services.converter.write_sheet_rows"):
        convert_file(ConversionRequest(input_path=tmp_path / "c.xlsx"), on_progress=events.append)
    assert [e.percent for e in events] == [50, 100]
