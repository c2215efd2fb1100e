"""
Tests for run_split: a chunked input CSV is re-written through RollingCsv,
optionally across several numbered files, with a text report.
"""

import pytest

from rollcsv.errors import MalformedRowError
from rollcsv.io.store import RollingCsv
from rollcsv.pipeline.runner import run_split


def make_input(path, n_rows: int) -> str:
    lines = ["id,name"] + [f"{i},name{i}" for i in range(n_rows)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def expected_rows(n_rows: int):
    return [{"id": str(i), "name": f"name{i}"} for i in range(n_rows)]


def test_split_without_rotation_writes_one_file(tmp_path):
    src = make_input(tmp_path / "in.csv", 5)
    out = tmp_path / "out" / "rows.csv"

    summary = run_split(src, str(out), settings={"profile": "legacy"}, chunksize=2)

    assert summary["rows_total"] == 5
    assert summary["batches"] == 3
    assert summary["files"] == {str(out): 5}
    with open(out, "r", encoding="utf-8", newline="") as f:
        assert f.read() == "id;name\n0;name0\n1;name1\r\n2;name2\n3;name3\r\n4;name4"
    assert RollingCsv(legacy=True).read(str(out), {"delimiter": ";"}) == expected_rows(5)


def test_split_with_rotation_writes_numbered_files(tmp_path):
    src = make_input(tmp_path / "in.csv", 5)
    out = tmp_path / "rows.csv"

    summary = run_split(
        src,
        str(out),
        settings={"profile": "modern", "max_file_size_mb": 1e-6, "pad": "00"},
        chunksize=2,
    )

    names = [str(tmp_path / f"rows.0{i}.csv") for i in range(3)]
    assert list(summary["files"]) == names
    reader = RollingCsv()
    rows = []
    for name in names:
        rows.extend(reader.read(name))
    assert rows == expected_rows(5)


def test_split_shares_file_until_threshold(tmp_path):
    src = make_input(tmp_path / "in.csv", 6)
    out = tmp_path / "rows.csv"

    summary = run_split(src, str(out), settings={"profile": "legacy", "max_file_size_mb": 1}, chunksize=2)

    target = str(tmp_path / "rows.000.csv")
    assert summary["files"] == {target: 6}
    assert RollingCsv().read(target, {"delimiter": ";"}) == expected_rows(6)


def test_split_reads_settings_file(tmp_path):
    src = make_input(tmp_path / "in.csv", 3)
    cfg = tmp_path / "split.yaml"
    cfg.write_text('profile: legacy\npad: "0"\nmax_file_size_mb: 1\n', encoding="utf-8")

    summary = run_split(src, str(tmp_path / "rows.csv"), config_yaml=str(cfg))

    assert summary["files"] == {str(tmp_path / "rows.0.csv"): 3}


def test_split_reports_progress_and_writes_log(tmp_path):
    src = make_input(tmp_path / "in.csv", 4)
    log_txt = tmp_path / "logs" / "split.txt"
    events = []

    run_split(
        src,
        str(tmp_path / "rows.csv"),
        log_txt=str(log_txt),
        chunksize=2,
        progress_cb=events.append,
    )

    phases = [e["phase"] for e in events]
    assert phases == ["start", "processing", "processing", "done"]
    assert events[-1]["rows_done"] == 4

    report = log_txt.read_text(encoding="utf-8")
    assert "ОТЧЁТ РАЗБИЕНИЯ CSV" in report
    assert "Строк обработано: 4" in report
    assert "rows.csv: строк 4" in report
    assert report.rstrip().endswith("КОНЕЦ ОТЧЁТА ===============")


def test_split_stops_on_long_row_and_keeps_old_report(tmp_path):
    src = tmp_path / "in.csv"
    src.write_text("id,name\n0,a\n1,b\n2,c,extra\n3,d\n", encoding="utf-8")
    log_txt = tmp_path / "split.txt"
    log_txt.write_text("previous run\n", encoding="utf-8")
    out = tmp_path / "rows.csv"

    with pytest.raises(MalformedRowError) as exc_info:
        run_split(str(src), str(out), settings={"profile": "legacy"}, log_txt=str(log_txt), chunksize=2)

    assert exc_info.value.row == 3
    # первый чанк успел записаться, обрезанных строк нет
    assert RollingCsv().read(str(out), {"delimiter": ";"}) == [{"id": "0", "name": "a"}, {"id": "1", "name": "b"}]
    assert log_txt.read_text(encoding="utf-8") == "previous run\n"
    assert not (tmp_path / "split.txt.part").exists()
