import json
import os
from typing import Any, Dict, List

import pandas as pd

_TEXT_KEYS = ("puzzle", "puzzle_text", "text", "input")
_STRUCTURED_KEYS = ("board", "row_pos", "row_neg", "col_pos", "col_neg")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads Magnets puzzles from a file. Handles .txt, .json, .jsonl, .csv and .parquet.
    Returns a list of raw puzzle records, each with an `id`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = os.path.splitext(os.path.basename(file_path))[0]

    def _is_nonempty_str(value: Any) -> bool:
        return isinstance(value, str) and value.strip() != ""

    def _normalize_record(record: Dict[str, Any], position: int) -> Dict[str, Any]:
        if not _is_nonempty_str(record.get("puzzle")):
            for key in _TEXT_KEYS[1:]:
                if _is_nonempty_str(record.get(key)):
                    record["puzzle"] = record[key].strip()
                    break
        if not _is_nonempty_str(record.get("id")) and not isinstance(record.get("id"), int):
            record["id"] = stem if position == 0 else f"{stem}-{position}"
        return record

    def _usable(record: Any) -> bool:
        if not isinstance(record, dict):
            return False
        if any(_is_nonempty_str(record.get(key)) for key in _TEXT_KEYS):
            return True
        return all(key in record for key in _STRUCTURED_KEYS)

    def _from_records(records: List[Any]) -> List[Dict[str, Any]]:
        usable = [r for r in records if _usable(r)]
        return [_normalize_record(r, i) for i, r in enumerate(usable)]

    # Case 1: plain text, one puzzle per file
    if file_path.endswith(".txt"):
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
        return [{"id": stem, "puzzle": text}]

    # Case 2: tabular files (Parquet binary or CSV)
    if file_path.endswith(".parquet") or file_path.endswith(".csv"):
        try:
            if file_path.endswith(".parquet"):
                df = pd.read_parquet(file_path)
            else:
                df = pd.read_csv(file_path)
        except Exception as e:
            print(f"Error reading {file_path}: {e}")
            return []
        df = df.astype(object).where(pd.notna(df), None)
        return _from_records(df.to_dict(orient="records"))

    # Case 3: JSON file (object or array)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if isinstance(payload, list):
                return _from_records(payload)
            return _from_records([payload])
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            pass

    # Case 4: JSONL file
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            data.append(obj)
    return _from_records(data)
