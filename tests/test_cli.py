from __future__ import annotations

from pathlib import Path

import dxfcodec.cli as cli_module
from tests._dxf_helpers import drawing_text, dxf_records_of_type, group_values

LINE = [
    (0, "LINE"),
    (5, "2B"),
    (100, "AcDbEntity"),
    (8, "WALLS"),
    (100, "AcDbLine"),
    (10, "0.0"),
    (20, "0.0"),
    (30, "0.0"),
    (11, "10.0"),
    (21, "5.0"),
    (31, "0.0"),
]

BAD_LINE = [(0, "LINE"), (8, "0"), (10, "1.0"), (20, "1.0"), (11, "1.0"), (21, "1.0")]


def _write_sample(tmp_path: Path, entities=LINE) -> Path:
    path = tmp_path / "sample.dxf"
    path.write_text(drawing_text(entities), encoding="utf-8")
    return path


def test_cli_inspect_reports_counts(tmp_path: Path, capsys) -> None:
    path = _write_sample(tmp_path, LINE + [(0, "SPLINE"), (8, "0")])

    code = cli_module.main(["inspect", str(path)])

    assert code == 0
    out = capsys.readouterr().out
    assert "version: AC1015 (R2000)" in out
    assert "total_records: 1" in out
    assert "records[LINE]: 1" in out
    assert "warnings: 1" in out
    assert "diagnostic[unsupported record type 'SPLINE' skipped]: 1" in out


def test_cli_inspect_names_ac1009_as_r12(tmp_path: Path, capsys) -> None:
    path = tmp_path / "r12.dxf"
    path.write_text(drawing_text(LINE, acadver="AC1009"), encoding="utf-8")

    code = cli_module.main(["inspect", str(path)])

    assert code == 0
    assert "version: AC1009 (R12)" in capsys.readouterr().out


def test_cli_inspect_verbose_lists_each_diagnostic(tmp_path: Path, capsys) -> None:
    path = _write_sample(tmp_path, LINE + [(999, "hand edited")])

    code = cli_module.main(["inspect", "--verbose", str(path)])

    assert code == 0
    out = capsys.readouterr().out
    assert "diagnostic: info: line " in out
    assert "comment: hand edited" in out


def test_cli_inspect_missing_file(tmp_path: Path, capsys) -> None:
    code = cli_module.main(["inspect", str(tmp_path / "missing.dxf")])

    assert code == 2
    assert "error: file not found" in capsys.readouterr().err


def test_cli_inspect_reports_fatal_stream_errors(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.dxf"
    path.write_text("  0\nSECTION\n  2\nENTITIES\n  0\n", encoding="utf-8")

    code = cli_module.main(["inspect", str(path)])

    assert code == 2
    assert "error: failed to read DXF" in capsys.readouterr().err


def test_cli_rewrite_targets_older_release(tmp_path: Path, capsys) -> None:
    source = _write_sample(tmp_path)
    output = tmp_path / "out" / "r12.dxf"

    code = cli_module.main(["rewrite", str(source), str(output), "--dxf-version", "R12"])

    assert code == 0
    out = capsys.readouterr().out
    assert "target_version: AC1009" in out
    assert "written_records: 1" in out
    lines = dxf_records_of_type(output, "LINE")
    assert len(lines) == 1
    assert group_values(lines[0], "100") == []
    assert group_values(lines[0], "8") == ["WALLS"]


def test_cli_rewrite_skips_invalid_records(tmp_path: Path, capsys) -> None:
    source = _write_sample(tmp_path, LINE + BAD_LINE)
    output = tmp_path / "out.dxf"

    code = cli_module.main(["rewrite", str(source), str(output)])

    assert code == 0
    out = capsys.readouterr().out
    assert "skipped_records: 1" in out
    assert "skipped[LINE]: 1" in out


def test_cli_rewrite_strict_fails_on_invalid_records(tmp_path: Path, capsys) -> None:
    source = _write_sample(tmp_path, LINE + BAD_LINE)

    code = cli_module.main(["rewrite", str(source), str(tmp_path / "out.dxf"), "--strict"])

    assert code == 2
    assert "start point and end point are identical" in capsys.readouterr().err


def test_cli_rewrite_rejects_unknown_version(tmp_path: Path, capsys) -> None:
    source = _write_sample(tmp_path)

    code = cli_module.main(["rewrite", str(source), str(tmp_path / "out.dxf"), "--dxf-version", "R99"])

    assert code == 2
    assert "error: failed to rewrite DXF" in capsys.readouterr().err


def test_cli_rewrite_wide_graphics_size(tmp_path: Path) -> None:
    entities = LINE + [(92, "2"), (310, "0102")]
    source = _write_sample(tmp_path, entities)
    output = tmp_path / "wide.dxf"

    code = cli_module.main(["rewrite", str(source), str(output), "--wide-graphics-size"])

    assert code == 0
    line = dxf_records_of_type(output, "LINE")[0]
    assert group_values(line, "160") == ["2"]
    assert group_values(line, "92") == []
    assert group_values(line, "310") == ["0102"]


def test_cli_convert_reports_failure(monkeypatch, tmp_path: Path, capsys) -> None:
    source = _write_sample(tmp_path)

    def _missing_backend(*args, **kwargs):
        raise ImportError("ezdxf is required for DXF export.")

    monkeypatch.setattr(cli_module, "to_dxf", _missing_backend)

    code = cli_module.main(["convert", str(source), str(tmp_path / "out.dxf")])

    assert code == 2
    assert "error: failed to convert DXF: ezdxf is required" in capsys.readouterr().err


def test_cli_without_command_prints_help(capsys) -> None:
    assert cli_module.main([]) == 0
    assert "usage: dxfcodec" in capsys.readouterr().out
