"""Dashboard statistics schema."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Aggregate counts for the caller's applications.

    Attributes:
        total_applications: Applications in the date window.
        applied: Applications with status Applied.
        interviews: Applications with status Interview.
        offers: Applications with status Offer.
        accepted: Applications with status Accepted.
        rejected: Applications with status Rejected.
        withdrawn: Applications with status Withdrawn.
        upcoming_interviews: Scheduled interviews from now on (not windowed).
        response_rate: (interviews + offers + rejected) / total * 100,
            rounded to 2 decimals; 0 when there are no applications.
    """

    total_applications: int = 0
    applied: int = 0
    interviews: int = 0
    offers: int = 0
    accepted: int = 0
    rejected: int = 0
    withdrawn: int = 0
    upcoming_interviews: int = 0
    response_rate: float = 0.0
