"""Flat CSV table for accounts: ``id,passwordHash,role``."""

from __future__ import annotations

from pathlib import Path
import csv

FIELDNAMES = ("id", "passwordHash", "role")


def load(path: Path) -> list[dict]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", newline="") as f:
        if not f.read(1):
            return []
        f.seek(0)
        rows = []
        for row in csv.DictReader(f):
            if not row.get("id"):
                continue
            rows.append({name: (row.get(name) or "") for name in FIELDNAMES})
        return rows


def save(path: Path, rows: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    tmp.replace(path)
