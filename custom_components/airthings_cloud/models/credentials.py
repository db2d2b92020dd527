"""Account and request-window models for Airthings Cloud integration."""

import datetime
from dataclasses import dataclass, field

from ..const import SAMPLE_TIME_FORMAT, SAMPLE_WINDOW


@dataclass(frozen=True)
class Credentials:
    """Dashboard login and the device to poll."""

    username: str
    password: str = field(repr=False)
    device_id: str


@dataclass(frozen=True)
class SampleWindow:
    """Time range queried for samples, centred on the tick."""

    start: datetime.datetime
    end: datetime.datetime

    @classmethod
    def around(cls, now: datetime.datetime) -> "SampleWindow":
        return cls(start=now - SAMPLE_WINDOW, end=now + SAMPLE_WINDOW)

    def as_params(self) -> dict[str, str]:
        """Return the ``from``/``to`` query parameters."""
        return {
            "from": self.start.strftime(SAMPLE_TIME_FORMAT),
            "to": self.end.strftime(SAMPLE_TIME_FORMAT),
        }
