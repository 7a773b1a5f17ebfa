"""Parse the tabular hero feed into a hero catalog and weekly score history."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from io import StringIO
from pathlib import Path
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

FEED_SHEET_ID = "10GdAFNpvbCQD5stPiyPDatiWhRW6MAizYwRazLyuSy0"
DEFAULT_FEED_URL = f"https://docs.google.com/spreadsheets/d/{FEED_SHEET_ID}/export?format=csv&gid=0"

SNAPSHOT_MAX_AGE = timedelta(days=7)

HEADER_LINE = 1
NAME_COLUMN = 4
HANDLE_COLUMN = 5
STARS_COLUMN = 15
FIRST_WEEK_COLUMN = 75
WEEK_COLUMNS = 53
MIN_ROW_COLUMNS = 20

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class HeroRecord(BaseModel):
    hero_key: str = Field(..., min_length=2)
    handle: str = ""
    name: str = ""
    stars: int


@dataclass
class IngestReport:
    processed_rows: int = 0
    skipped_rows: int = 0
    header: List[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        total = self.processed_rows + self.skipped_rows
        return self.processed_rows / total if total else 0.0


class FeedSnapshot(BaseModel):
    """Point-in-time copy of the feed, serialisable for an external key-value store."""

    heroes: List[HeroRecord] = Field(default_factory=list)
    history: Dict[str, List[int]] = Field(default_factory=dict)
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: Optional[str] = None

    def is_stale(self, max_age: timedelta = SNAPSHOT_MAX_AGE, *, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        fetched_at = self.fetched_at
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)
        return now - fetched_at > max_age

    def hero_stars(self) -> Dict[str, int]:
        return {hero.hero_key: hero.stars for hero in self.heroes}


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _cell(row: List[str], index: int) -> str:
    return row[index].strip() if index < len(row) else ""


def parse_feed(text: str, *, source: Optional[str] = None) -> tuple[FeedSnapshot, IngestReport]:
    """Parse feed CSV text.

    The first line is a banner, the second holds the headers and data starts
    on the third. Weekly scores are listed most recent first.
    """

    lines = text.splitlines()
    if len(lines) <= HEADER_LINE:
        raise ValueError("feed has no header line")

    report = IngestReport(header=next(csv.reader([lines[HEADER_LINE]]), []))
    heroes: List[HeroRecord] = []
    history: Dict[str, List[int]] = {}

    for line_no, line in enumerate(lines[HEADER_LINE + 1:], start=HEADER_LINE + 2):
        if not line.strip():
            report.skipped_rows += 1
            continue
        row = next(csv.reader(StringIO(line)), [])
        if len(row) < MIN_ROW_COLUMNS:
            report.skipped_rows += 1
            logger.debug("Line %s skipped (only %s columns)", line_no, len(row))
            continue

        name = _cell(row, NAME_COLUMN)
        handle = _cell(row, HANDLE_COLUMN)
        hero_key = (handle or name).upper()
        stars = _parse_int(_cell(row, STARS_COLUMN))
        if len(hero_key) < 2 or stars is None:
            report.skipped_rows += 1
            logger.debug("Line %s skipped (hero=%r, stars=%r)", line_no, hero_key, _cell(row, STARS_COLUMN))
            continue
        if hero_key in history:
            report.skipped_rows += 1
            logger.warning("Line %s skipped (%s already listed)", line_no, hero_key)
            continue

        scores: List[int] = []
        for column in range(FIRST_WEEK_COLUMN, FIRST_WEEK_COLUMN + WEEK_COLUMNS):
            value = _parse_int(_cell(row, column))
            if value is not None and value >= 0:
                scores.append(value)
        if not scores:
            report.skipped_rows += 1
            logger.debug("Line %s skipped (%s has no tournament scores)", line_no, hero_key)
            continue

        history[hero_key] = scores
        heroes.append(HeroRecord(hero_key=hero_key, handle=handle, name=name, stars=stars))
        report.processed_rows += 1

    logger.info(
        "Parsed feed: %s heroes processed, %s rows skipped (%.1f%% success)",
        report.processed_rows,
        report.skipped_rows,
        report.success_rate * 100,
    )
    snapshot = FeedSnapshot(heroes=heroes, history=history, source=source)
    return snapshot, report


def load_feed_csv(path: Path) -> tuple[FeedSnapshot, IngestReport]:
    return parse_feed(path.read_text(encoding="utf-8"), source=str(path))


def fetch_feed(
    url: str = DEFAULT_FEED_URL,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30.0,
) -> tuple[FeedSnapshot, IngestReport]:
    """Download the feed CSV and parse it."""

    logger.info("Fetching hero feed from %s", url)
    if client is None:
        with httpx.Client(timeout=timeout, follow_redirects=True) as owned_client:
            response = owned_client.get(url)
    else:
        response = client.get(url)
    response.raise_for_status()
    logger.info("Received %.1fKB of feed data", len(response.content) / 1024)
    return parse_feed(response.text, source=url)
