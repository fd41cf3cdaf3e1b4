from __future__ import annotations

from pathlib import Path

from models.records import Reading
from storage.record_store import RecordStore, build_default_store, parse_line


def test_parse_line_reads_all_fields() -> None:
    reading = parse_line("Kuala Lumpur,Wilayah Persekutuan,83,Moderate,2025-11-29\n")

    assert reading == Reading(
        district="Kuala Lumpur",
        state="Wilayah Persekutuan",
        api_value=83,
        status="Moderate",
        date="2025-11-29",
    )
    assert reading.area_key == "Kuala Lumpur, Wilayah Persekutuan"


def test_parse_line_skips_blank_and_comment_lines() -> None:
    assert parse_line("") is None
    assert parse_line("\n") is None
    assert parse_line("# district,state,api,status,date") is None


def test_parse_line_non_numeric_api_becomes_zero() -> None:
    reading = parse_line("Ipoh,Perak,n/a,Good,2025-11-01")

    assert reading is not None
    assert reading.api_value == 0
    assert reading.status == "Good"


def test_parse_line_keeps_commas_in_date_field() -> None:
    reading = parse_line("Ipoh,Perak,40,Good,2025-11-01,extra,bits")

    assert reading is not None
    assert reading.date == "2025-11-01,extra,bits"


def test_parse_line_missing_trailing_fields_use_defaults() -> None:
    reading = parse_line("Ipoh,Perak")

    assert reading == Reading(district="Ipoh", state="Perak")


def test_parse_line_does_not_recompute_stored_status() -> None:
    reading = parse_line("Klang,Selangor,150,Good,2025-11-02")

    assert reading is not None
    assert reading.status == "Good"


def test_from_lines_preserves_file_order() -> None:
    store = RecordStore.from_lines(
        [
            "# header",
            "B,State,20,Good,2025-11-02",
            "",
            "A,State,10,Good,2025-11-01",
        ]
    )

    assert [reading.district for reading in store] == ["B", "A"]
    assert len(store) == 2
    assert not store.is_empty()


def test_from_path_missing_file_yields_empty_store(tmp_path: Path) -> None:
    store = RecordStore.from_path(tmp_path / "missing.txt")

    assert store.is_empty()
    assert len(store) == 0
    assert store.source == str(tmp_path / "missing.txt")


def test_from_path_loads_file(tmp_path: Path) -> None:
    path = tmp_path / "readings.txt"
    path.write_text(
        "# comment\n"
        "Ipoh,Perak,40,Good,2025-11-01\n"
        "Ipoh,Perak,70,Moderate,2025-11-02\n",
        encoding="utf-8",
    )

    store = RecordStore.from_path(path)

    assert len(store) == 2
    assert [reading.date for reading in store.for_date("2025-11-02")] == ["2025-11-02"]


def test_build_default_store_uses_environment(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "env.txt"
    path.write_text("Ipoh,Perak,40,Good,2025-11-01\n", encoding="utf-8")
    monkeypatch.setenv("AIRQ_DATA_PATH", str(path))

    store = build_default_store()

    assert len(store) == 1
    assert store.source == str(path)
