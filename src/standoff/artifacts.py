from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import UnpackResult


def serialize_unpack_result(result: UnpackResult) -> str:
    """
    Stable JSON serialization for audit artifacts.
    """

    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_standoff_json_artifact(*, result: UnpackResult, out_file: Path) -> None:
    """
    Write unpack output (text + annotations) to a JSON artifact file.

    Callers provide an explicit output path; no artifact root is assumed.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_unpack_result(result), encoding="utf-8")


def write_text_artifact(*, result: UnpackResult, out_file: Path) -> None:
    # Plain extracted text only, byte-for-byte what the offsets refer to.
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(result.text, encoding="utf-8", newline="")
