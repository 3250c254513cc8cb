from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_json
from rawcols.core.errors import DocumentError, DuplicateNameError, FieldValidationError
from rawcols.io.document import extract_records, load_document, parse_document_text, read_raw_columns

YAML_DOC = """\
raw_columns:
  - name: age
    type: INT_COLUMN
    min: 0
    max: 120
  - name: city
    type: STRING_COLUMN
    required: true
    values: [sf, nyc]
  - name: score
    type: FLOAT_COLUMN
    values: null
"""

JSON_DOC = {
    "raw_columns": [
        {"name": "age", "type": "INT_COLUMN", "min": 0, "max": 120},
        {"name": "city", "type": "STRING_COLUMN", "required": True, "values": ["sf", "nyc"]},
        {"name": "score", "type": "FLOAT_COLUMN", "values": None},
    ]
}


def test_yaml_and_json_documents_validate_identically(tmp_path: Path):
    y = tmp_path / "columns.yaml"
    y.write_text(YAML_DOC, encoding="utf-8")
    j = tmp_path / "columns.json"
    write_json(j, JSON_DOC)

    cols_y = read_raw_columns(y)
    cols_j = read_raw_columns(j)

    assert cols_y == cols_j
    assert cols_y.names() == ["age", "city", "score"]
    assert cols_y.get("city").values == ("sf", "nyc")
    assert cols_y.get("score").values is None


def test_top_level_list_is_accepted(tmp_path: Path):
    p = tmp_path / "columns.yml"
    p.write_text("- {name: a, type: STRING_COLUMN}\n- {name: b, type: INT_COLUMN}\n", encoding="utf-8")
    assert read_raw_columns(p).names() == ["a", "b"]


def test_yaml_absent_vs_null_is_preserved():
    doc = parse_document_text("- {name: a, type: STRING_COLUMN, values: null}\n", fmt="yaml")
    assert "values" in doc[0]
    assert doc[0]["values"] is None


def test_empty_yaml_document_yields_no_columns(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert len(read_raw_columns(p)) == 0


def test_invalid_yaml_raises_document_error(tmp_path: Path):
    p = tmp_path / "bad.yaml"
    p.write_text("raw_columns: [\n", encoding="utf-8")
    with pytest.raises(DocumentError, match=r"bad\.yaml: invalid YAML"):
        load_document(p)


def test_invalid_json_raises_document_error(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(DocumentError, match=r"bad\.json: invalid JSON"):
        load_document(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "columns.toml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(DocumentError, match=r"unsupported file extension '\.toml'"):
        read_raw_columns(p)


def test_extract_records_shapes():
    assert extract_records(None) == []
    assert extract_records([{"name": "a"}]) == [{"name": "a"}]
    assert extract_records({"raw_columns": None}) == []
    with pytest.raises(DocumentError, match=r"unexpected top-level keys: \['models'\]"):
        extract_records({"raw_columns": [], "models": []})
    with pytest.raises(DocumentError, match=r"raw_columns: expected a list, got dict"):
        extract_records({"raw_columns": {"name": "a"}})
    with pytest.raises(DocumentError, match=r"expected a list of column records"):
        extract_records("age")


def test_document_validation_errors_propagate(tmp_path: Path):
    p = tmp_path / "dup.json"
    write_json(p, [{"name": "x", "type": "STRING_COLUMN"}, {"name": "x", "type": "INT_COLUMN"}])
    with pytest.raises(DuplicateNameError, match=r"'x'"):
        read_raw_columns(p)

    p2 = tmp_path / "bounds.yaml"
    p2.write_text("- {name: age, type: INT_COLUMN, min: 10, max: 5}\n", encoding="utf-8")
    with pytest.raises(FieldValidationError, match=r"min \(10\) must not exceed max \(5\)"):
        read_raw_columns(p2)


def test_non_utf8_file_raises_document_error(tmp_path: Path):
    p = tmp_path / "latin1.json"
    p.write_bytes(b'[{"name": "caf\xe9", "type": "STRING_COLUMN"}]\xff')
    with pytest.raises(DocumentError, match=r"latin1\.json: not valid UTF-8"):
        read_raw_columns(p)


def test_unreadable_path_raises_document_error(tmp_path: Path):
    p = tmp_path / "columns.yaml"
    p.mkdir()
    with pytest.raises(DocumentError, match=r"columns\.yaml: cannot read file"):
        load_document(p)
