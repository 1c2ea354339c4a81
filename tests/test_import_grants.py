"""
Tests for the CSV grants import.
"""

from datetime import datetime

from grantmatch.import_grants import read_grants_csv, row_to_grant

CSV = """bdns_id,title,organismo,scope,start_date,end_date,budget,raw_text,tags
900001,Kit Consulting,Red.es,Nacional,01/03/2024,31/12/2025,24000,Asesoramiento digital,Digitalizacion; PYMES
,Bono Comercio,Ayuntamiento de Madrid,Madrid,,,,,
900003,,Sin titulo,Nacional,,,,,
"""


def test_read_csv_skips_incomplete_rows(tmp_path):
    path = tmp_path / "grants.csv"
    path.write_text(CSV, encoding="utf-8")

    grants = read_grants_csv(str(path))
    assert [g["title"] for g in grants] == ["Kit Consulting", "Bono Comercio"]

    kit = grants[0]
    assert kit["bdns_id"] == "900001"
    assert kit["budget"] == 24000.0
    assert kit["tags"] == ["Digitalizacion", "PYMES"]
    assert kit["start_date"] == datetime(2024, 3, 1)
    assert kit["end_date"] == datetime(2025, 12, 31)

    bono = grants[1]
    assert bono["bdns_id"] is None
    assert bono["budget"] is None
    assert bono["raw_text"] is None
    assert bono["tags"] == []
    assert bono["start_date"] is None


def test_row_to_grant_requires_scope():
    assert row_to_grant({"title": "T", "organismo": "O", "scope": " "}) is None
    assert row_to_grant({"title": "T", "organismo": "O", "scope": "Local"})["scope"] == "Local"
