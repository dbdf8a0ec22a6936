# Licensed under the Apache License, Version 2.0 (the "License");
# ...
from __future__ import annotations

import csv
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..domain.models import DuplicateGroup

SUPPORTED_FORMATS = ("json", "ndjson", "csv")


def printable_path(path: str) -> str:
    """
    Render a path for humans and text reports.

    Names that are not valid UTF-8 come back from os.fsdecode with lone
    surrogates, which no text stream can encode; their raw bytes are shown
    as \\xNN escapes instead.
    """
    return os.fsencode(path).decode("utf-8", "backslashreplace")


class ReportService:
    """
    Generates human- and machine-readable duplicate reports (JSON/NDJSON/CSV).

    Notes:
      - JSON (default): one JSON array of groups; each group is
        {"fingerprint": ..., "paths": [...]}.
      - NDJSON: one group object per line.
      - CSV: flattened rows with a synthetic group_id; stable column order.
    """

    def write_duplicates(
        self, groups: Iterable[DuplicateGroup], out: Path, fmt: str = "json"
    ) -> Path:
        """
        Write an exact-duplicate report to `out` in the specified format.

        Returns:
            The path written.

        Raises:
            ValueError: if an unsupported format is requested.
        """
        fmt = (fmt or "json").lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format: {fmt}")

        payload: List[Dict[str, Any]] = [
            {
                "fingerprint": g.fingerprint,
                "paths": [printable_path(p) for p in g.paths],
            }
            for g in groups
        ]

        out = Path(out)
        out.parent.mkdir(parents=True, exist_ok=True)

        if fmt == "json":
            out.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            return out

        if fmt == "ndjson":
            lines = (json.dumps(group, ensure_ascii=False) for group in payload)
            text = "\n".join(lines)
            out.write_text(text + ("\n" if text else ""), encoding="utf-8")
            return out

        fieldnames = ["group_id", "fingerprint", "path"]
        with open(out, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for group_id, group in enumerate(payload, start=1):
                for path in group["paths"]:
                    writer.writerow(
                        {
                            "group_id": group_id,
                            "fingerprint": group["fingerprint"],
                            "path": path,
                        }
                    )
        return out
