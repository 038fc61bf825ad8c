# coachslots/api/deps.py

from fastapi import Request

from coachslots.services.availability import AvailabilityResolver


def get_resolver(request: Request) -> AvailabilityResolver:
    """The resolver built at startup (see coachslots.main)."""
    return request.app.state.resolver
