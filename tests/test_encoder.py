from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import cast

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from camera_driver.encoder import encode_fields


def test_encode_start_body_is_single_line_json() -> None:
    text = encode_fields({"success": "true", "message": "Camera started"})
    assert text == '{"message":"Camera started","success":"true"}'
    assert "\n" not in text
    assert json.loads(text) == {"success": "true", "message": "Camera started"}


def test_encode_is_stable_regardless_of_insertion_order() -> None:
    a = encode_fields({"status": "running", "error": ""})
    b = encode_fields({"error": "", "status": "running"})
    assert a == b == '{"error":"","status":"running"}'


def test_encode_empty_mapping() -> None:
    assert encode_fields({}) == "{}"


def test_encode_escapes_quotes_and_backslashes() -> None:
    text = encode_fields({"error": 'bad "quote" and \\ slash\nnewline'})
    assert "\n" not in text
    decoded = cast(dict[str, str], json.loads(text))
    assert decoded == {"error": 'bad "quote" and \\ slash\nnewline'}


def test_encode_rejects_non_string_values() -> None:
    with pytest.raises(TypeError):
        encode_fields({"success": True})  # type: ignore[dict-item]

    with pytest.raises(TypeError):
        encode_fields({1: "one"})  # type: ignore[dict-item]
