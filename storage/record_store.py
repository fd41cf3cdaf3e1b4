from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from models.records import Reading
from settings import get_settings

logger = logging.getLogger(__name__)

_FIELD_COUNT = 5


class RecordStore:
    """Read-only, ordered table of daily readings."""

    def __init__(self, readings: Iterable[Reading] = (), source: Optional[str] = None) -> None:
        self._readings: tuple[Reading, ...] = tuple(readings)
        self.source = source

    @property
    def readings(self) -> Sequence[Reading]:
        return self._readings

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self._readings)

    def is_empty(self) -> bool:
        return not self._readings

    def for_date(self, date: str) -> List[Reading]:
        return [reading for reading in self._readings if reading.date == date]

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: Optional[str] = None) -> "RecordStore":
        readings: list[Reading] = []
        for row_number, line in enumerate(lines, start=1):
            reading = parse_line(line, row_number=row_number)
            if reading is not None:
                readings.append(reading)
        return cls(readings, source=source)

    @classmethod
    def from_path(cls, path: Path) -> "RecordStore":
        """Load a store from disk; an unreadable file yields an empty store."""
        try:
            with path.open("r", encoding="utf-8") as handle:
                store = cls.from_lines(handle, source=str(path))
        except OSError as exc:
            logger.warning(
                "Could not open data file; continuing with no records",
                extra={"source": str(path), "reason": exc.strerror},
            )
            return cls(source=str(path))

        logger.info(
            "Loaded air quality records",
            extra={"source": str(path), "record_count": len(store)},
        )
        return store


def parse_line(line: str, row_number: int = 0) -> Optional[Reading]:
    """Parse one ``district,state,api,status,date`` line.

    Blank and ``#`` comment lines yield ``None``. The date is everything after
    the fourth comma. Missing trailing fields keep their defaults and a
    non-numeric API value becomes 0.
    """
    text = line.rstrip("\r\n")
    if not text or text.startswith("#"):
        return None

    fields = text.split(",", _FIELD_COUNT - 1)
    fields += [""] * (_FIELD_COUNT - len(fields))
    district, state, api_raw, status, date = fields

    try:
        api_value = int(api_raw)
    except ValueError:
        logger.debug(
            "Non-numeric API value replaced with 0",
            extra={"row_number": row_number, "invalid_value": api_raw},
        )
        api_value = 0

    return Reading(
        district=district,
        state=state,
        api_value=api_value,
        status=status,
        date=date,
    )


@lru_cache
def build_default_store(path: Optional[str] = None) -> RecordStore:
    settings = get_settings()
    data_path = settings.data_path if path is None else path
    return RecordStore.from_path(Path(data_path))
