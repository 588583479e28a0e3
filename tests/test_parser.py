import csv
import json

import pandas as pd
import pytest

from src.magnets.loader import load_puzzles
from src.magnets.model import InferenceMode
from src.magnets.parser import parse_puzzle, parse_puzzle_text

from conftest import GRID_4X4_TEXT, SINGLE_DOMINO_RECORD


def test_parse_puzzle_text_reads_all_sections():
    record = parse_puzzle_text(GRID_4X4_TEXT)
    assert (record["rows"], record["cols"]) == (4, 4)
    assert record["row_pos"] == [2, 2, 2, 1]
    assert record["col_neg"] == [1, 2, 2, 2]
    assert record["board"][0] == [0, 2, 1, 1]
    assert len(record["board"]) == 4


def test_parse_puzzle_from_text_defaults_to_arc_consistency():
    puzzle = parse_puzzle({"id": "p", "puzzle": GRID_4X4_TEXT})
    assert (puzzle.rows, puzzle.cols) == (4, 4)
    assert len(puzzle.dominoes) == 8
    assert puzzle.inference is InferenceMode.ARC_CONSISTENCY

    fc = parse_puzzle({"id": "p", "puzzle": GRID_4X4_TEXT}, inference="fc")
    assert fc.inference is InferenceMode.FORWARD_CHECKING


def test_parse_puzzle_accepts_json_encoded_fields():
    record = {key: json.dumps(value) for key, value in SINGLE_DOMINO_RECORD.items() if key != "id"}
    record["inference"] = "fc"
    puzzle = parse_puzzle(record)
    assert len(puzzle.dominoes) == 1
    assert puzzle.targets.col_neg == (1, 0)
    assert puzzle.inference is InferenceMode.FORWARD_CHECKING


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "empty"),
        ("4 x\n", "First line"),
        ("2 2\n1 0\n0 1\n", "Fourth line"),
        ("2 2\n1 0\n0 1\n1 0\n1 0\n1 2\n", "Not enough rows"),
    ],
)
def test_parse_puzzle_text_rejects_malformed_input(text, message):
    with pytest.raises(ValueError, match=message):
        parse_puzzle_text(text)


def test_parse_puzzle_rejects_short_target_list():
    record = dict(SINGLE_DOMINO_RECORD, row_pos=[1])
    with pytest.raises(ValueError, match="row positive"):
        parse_puzzle(record)


def test_load_text_file(tmp_path):
    path = tmp_path / "easy.txt"
    path.write_text(GRID_4X4_TEXT)
    records = load_puzzles(str(path))
    assert records == [{"id": "easy", "puzzle": GRID_4X4_TEXT}]


def test_load_json_list_and_jsonl(tmp_path):
    json_path = tmp_path / "batch.json"
    json_path.write_text(json.dumps([SINGLE_DOMINO_RECORD, {"text": GRID_4X4_TEXT}, {"junk": 1}]))
    records = load_puzzles(str(json_path))
    assert [r["id"] for r in records] == ["single-domino", "batch-1"]
    assert records[1]["puzzle"] == GRID_4X4_TEXT.strip()

    jsonl_path = tmp_path / "batch.jsonl"
    jsonl_path.write_text(json.dumps(SINGLE_DOMINO_RECORD) + "\n\nnot json\n")
    records = load_puzzles(str(jsonl_path))
    assert len(records) == 1
    assert parse_puzzle(records[0]).dominoes[0].poles == ((0, 0), (1, 0))


def test_load_csv_with_pandas(tmp_path):
    path = tmp_path / "batch.csv"
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "puzzle"])
        writer.writerow(["grid-a", GRID_4X4_TEXT])
    records = load_puzzles(str(path))
    assert records[0]["id"] == "grid-a"
    assert len(parse_puzzle(records[0]).dominoes) == 8


def test_load_parquet_with_pandas(tmp_path):
    pytest.importorskip("pyarrow")
    path = tmp_path / "batch.parquet"
    pd.DataFrame({"id": ["grid-a"], "puzzle": [GRID_4X4_TEXT]}).to_parquet(path)
    records = load_puzzles(str(path))
    assert records[0]["id"] == "grid-a"
    assert parse_puzzle(records[0]).rows == 4


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_puzzles(str(tmp_path / "nope.json"))
