"""
Partitioned news store.

Each partition (``global`` plus one per region) owns an independent list of
news items and an ordered list of category names. The in-memory copy is the
source of truth; every mutation rewrites the whole document on disk before
returning. Disk errors are logged and otherwise ignored.
"""

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from portal.core.errors import InUse, InvalidInput, NotFound
from portal.core.logging import get_logger
from portal.domain.partitions import PARTITIONS, is_partition
from portal.repositories import json_storage

log = get_logger("portal.news")

IMMUTABLE_FIELDS = ("id", "timestamp")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(item: dict) -> datetime:
    return parse_timestamp(item.get("timestamp")) or _EPOCH


class PartitionedNewsStore:
    """News items and categories for every partition, persisted to one JSON file."""

    def __init__(self, path: Path, *, clock=None) -> None:
        self.path = Path(path)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self._partitions: dict[str, dict] = json_storage.split_partitions({})

    # -------------------------------------- lifecycle --------------------------------------
    def load(self) -> None:
        """Read the document once; on failure keep the empty defaults."""
        try:
            db = json_storage.load(self.path)
        except (OSError, ValueError) as exc:
            log.error("Error loading news data from %s: %s", self.path, exc)
            return
        with self._lock:
            self._partitions = json_storage.split_partitions(db)
        log.info("Loaded news data from %s", self.path)

    def flush(self) -> None:
        with self._lock:
            self._persist()

    def _persist(self) -> None:
        try:
            json_storage.save(self.path, json_storage.join_partitions(self._partitions))
        except (OSError, TypeError, ValueError):
            log.exception("Error saving news data to %s", self.path)

    # -------------------------------------- helpers --------------------------------------
    def _partition(self, partition: str) -> dict:
        if not is_partition(partition):
            raise NotFound(f"Unknown partition '{partition}'")
        return self._partitions[partition]

    def _find_index(self, news: list[dict], news_id: str) -> int:
        for index, item in enumerate(news):
            if item.get("id") == news_id:
                return index
        return -1

    def _next_timestamp(self, news: list[dict]) -> str:
        now = self._clock()
        latest = max((_sort_key(item) for item in news), default=_EPOCH)
        return format_timestamp(max(now, latest))

    def _fresh_id(self, news: list[dict]) -> str:
        taken = {item.get("id") for item in news}
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in taken:
                return candidate

    @staticmethod
    def _clean_fields(fields: Any) -> dict:
        if not isinstance(fields, dict):
            raise InvalidInput("News payload must be a JSON object")
        return {key: value for key, value in fields.items() if key not in IMMUTABLE_FIELDS}

    # -------------------------------------- reads --------------------------------------
    def list_news(self, partition: str) -> list[dict]:
        with self._lock:
            news = self._partition(partition)["news"]
            # sorted() is stable, so equal timestamps keep insertion order
            return copy.deepcopy(sorted(news, key=_sort_key, reverse=True))

    def list_categories(self, partition: str) -> list[str]:
        with self._lock:
            return list(self._partition(partition)["newsCategories"])

    # -------------------------------------- news --------------------------------------
    def create_news(self, partition: str, fields: Any) -> dict:
        payload = self._clean_fields(fields)
        with self._lock:
            news = self._partition(partition)["news"]
            entry = {"id": self._fresh_id(news), **payload, "timestamp": self._next_timestamp(news)}
            news.append(entry)
            self._persist()
            log.info("Created news %s in %s", entry["id"], partition)
            return copy.deepcopy(entry)

    def update_news(self, partition: str, news_id: str, fields: Any) -> dict:
        payload = self._clean_fields(fields)
        with self._lock:
            news = self._partition(partition)["news"]
            index = self._find_index(news, news_id)
            if index == -1:
                raise NotFound()
            news[index] = {**news[index], **payload}
            self._persist()
            return copy.deepcopy(news[index])

    def delete_news(self, partition: str, news_id: str) -> None:
        with self._lock:
            section = self._partition(partition)
            index = self._find_index(section["news"], news_id)
            if index == -1:
                raise NotFound()
            del section["news"][index]
            self._persist()
            log.info("Deleted news %s from %s", news_id, partition)

    # -------------------------------------- categories --------------------------------------
    def create_category(self, partition: str, name: Any) -> list[str]:
        with self._lock:
            categories = self._partition(partition)["newsCategories"]
            if not isinstance(name, str) or not name.strip() or name in categories:
                raise InvalidInput("Invalid category")
            categories.append(name)
            self._persist()
            return list(categories)

    def delete_category(self, partition: str, name: str) -> None:
        with self._lock:
            section = self._partition(partition)
            if any(item.get("category") == name for item in section["news"]):
                raise InUse()
            if name not in section["newsCategories"]:
                raise NotFound("Category not found")
            section["newsCategories"].remove(name)
            self._persist()

    def snapshot(self) -> dict[str, dict]:
        """Deep copy of every partition, for tests and diagnostics."""
        with self._lock:
            return {key: copy.deepcopy(self._partitions[key]) for key in PARTITIONS}
