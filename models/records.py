"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass

STATUS_GOOD = "Good"
STATUS_MODERATE = "Moderate"
STATUS_UNHEALTHY = "Unhealthy"

STATUS_LABELS = (STATUS_GOOD, STATUS_MODERATE, STATUS_UNHEALTHY)


def area_key(district: str, state: str) -> str:
    return f"{district}, {state}"


@dataclass(frozen=True, slots=True)
class Reading:
    """A single daily API reading parsed from the data file.

    ``status`` is the label stored in the source file. It is kept verbatim and
    may disagree with the label derived from ``api_value``.
    """

    district: str = ""
    state: str = ""
    api_value: int = 0
    status: str = ""
    date: str = ""

    @property
    def area_key(self) -> str:
        return area_key(self.district, self.state)
