"""Update coordinators for Airthings Cloud integration."""

from .stats_coordinator import AirthingsStatsCoordinator, poll_interval_from_options

__all__ = [
    "AirthingsStatsCoordinator",
    "poll_interval_from_options",
]
