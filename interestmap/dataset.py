"""The working dataset: parsed respondent lines plus their ranking.

A dataset is built once per upload and never mutated.  The store swaps the
whole object on the next upload, so a request that grabbed the old one keeps
a consistent view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from interestmap.analysis.frequency import RankedInterests, aggregate
from interestmap.analysis.parser import RespondentLine, parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    lines: tuple[RespondentLine, ...] = ()
    ranked: tuple[tuple[str, int], ...] = ()
    source_name: str = ""
    records_read: int = 0  # raw records before empty ones were dropped

    @property
    def has_data(self) -> bool:
        return bool(self.ranked)

    @property
    def respondent_count(self) -> int:
        return len(self.lines)

    @property
    def distinct_interests(self) -> int:
        return len(self.ranked)

    @property
    def mention_count(self) -> int:
        return sum(count for _token, count in self.ranked)

    def ranked_list(self) -> RankedInterests:
        return list(self.ranked)


def decode_upload(payload: bytes) -> str:
    """Decode an uploaded file as UTF-8, tolerating a BOM and bad bytes."""
    return payload.decode("utf-8-sig", errors="replace")


def build_dataset(raw_text: str, source_name: str = "") -> Dataset:
    lines = parse(raw_text)
    ranked = aggregate(lines)
    records = raw_text.count("\n") + 1 if raw_text else 0
    dataset = Dataset(
        lines=tuple(lines),
        ranked=tuple(ranked),
        source_name=source_name,
        records_read=records,
    )
    logger.info(
        "Loaded %s: %d records, %d respondents, %d distinct interests",
        source_name or "<text>",
        records,
        dataset.respondent_count,
        dataset.distinct_interests,
    )
    return dataset


@dataclass
class DatasetStore:
    """Holds the current dataset for the running app."""

    current: Dataset = field(default_factory=Dataset)

    def replace(self, raw_text: str, source_name: str = "") -> Dataset:
        dataset = build_dataset(raw_text, source_name)
        self.current = dataset
        return dataset

    def clear(self) -> None:
        self.current = Dataset()
