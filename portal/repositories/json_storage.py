"""
JSON document persistence for the news partitions.

Layout on disk (kept compatible with existing db.json files)::

    {
      "news": [...], "newsCategories": [...],          # global partition
      "africa": {"news": [...], "newsCategories": [...]},
      ...
    }
"""

from __future__ import annotations

from pathlib import Path
import json

from portal.domain.partitions import GLOBAL, REGIONS


def empty_partition() -> dict:
    return {"news": [], "newsCategories": []}


def db_defaults(db: dict) -> dict:
    db.setdefault("news", [])
    db.setdefault("newsCategories", [])
    for region in REGIONS:
        section = db.get(region)
        if not isinstance(section, dict):
            section = empty_partition()
            db[region] = section
        section.setdefault("news", [])
        section.setdefault("newsCategories", [])
    return db


def load(path: Path) -> dict:
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{path} does not hold a JSON object")
        return db_defaults(loaded)
    return db_defaults({})


def save(path: Path, db: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)


def split_partitions(db: dict) -> dict[str, dict]:
    """Turn the on-disk document into ``{partition: {"news", "newsCategories"}}``."""
    db = db_defaults(db)
    partitions = {GLOBAL: {"news": db["news"], "newsCategories": db["newsCategories"]}}
    for region in REGIONS:
        partitions[region] = {
            "news": db[region]["news"],
            "newsCategories": db[region]["newsCategories"],
        }
    return partitions


def join_partitions(partitions: dict[str, dict]) -> dict:
    """Inverse of ``split_partitions``."""
    glob = partitions.get(GLOBAL) or empty_partition()
    db = {"news": glob["news"], "newsCategories": glob["newsCategories"]}
    for region in REGIONS:
        section = partitions.get(region) or empty_partition()
        db[region] = {"news": section["news"], "newsCategories": section["newsCategories"]}
    return db
