"""Display metadata for closed enums.

Every ActivityType and InterviewType member maps to a label, an icon name
and a color class. The tables are total: a member without an entry fails
at import time rather than rendering with a fallback.
"""

from dataclasses import dataclass
from enum import Enum

from job_tracker.schemas.enums import ActivityType, InterviewType


@dataclass(frozen=True)
class EnumStyle:
    """How one enum value is shown.

    Attributes:
        label: Human-readable label.
        icon: Icon name (lucide naming).
        color: CSS utility classes.
    """

    label: str
    icon: str
    color: str


ACTIVITY_STYLES: dict[ActivityType, EnumStyle] = {
    ActivityType.APPLICATION_CREATED: EnumStyle(
        "Application added", "plus", "text-blue-500"
    ),
    ActivityType.STATUS_CHANGE: EnumStyle("Status changed", "clock", "text-yellow-500"),
    ActivityType.NOTES_UPDATE: EnumStyle(
        "Notes updated", "message-square", "text-gray-500"
    ),
    ActivityType.INTERVIEW_SCHEDULED: EnumStyle(
        "Interview scheduled", "calendar", "text-purple-500"
    ),
    ActivityType.INTERVIEW_COMPLETED: EnumStyle(
        "Interview completed", "check-circle", "text-green-500"
    ),
}

INTERVIEW_TYPE_STYLES: dict[InterviewType, EnumStyle] = {
    InterviewType.PHONE: EnumStyle(
        "Phone", "phone", "bg-blue-500/10 text-blue-500 border-blue-500/20"
    ),
    InterviewType.VIDEO: EnumStyle(
        "Video", "video", "bg-green-500/10 text-green-500 border-green-500/20"
    ),
    InterviewType.IN_PERSON: EnumStyle(
        "In-person", "map-pin", "bg-purple-500/10 text-purple-500 border-purple-500/20"
    ),
    InterviewType.TECHNICAL: EnumStyle(
        "Technical", "clock", "bg-orange-500/10 text-orange-500 border-orange-500/20"
    ),
    InterviewType.FINAL: EnumStyle(
        "Final", "calendar", "bg-red-500/10 text-red-500 border-red-500/20"
    ),
}


def _check_total(enum_cls: type[Enum], table: dict) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        msg = f"No display style for {enum_cls.__name__}: {', '.join(missing)}"
        raise RuntimeError(msg)


_check_total(ActivityType, ACTIVITY_STYLES)
_check_total(InterviewType, INTERVIEW_TYPE_STYLES)


def activity_style(action_type: str | ActivityType) -> EnumStyle:
    """Look up the style for an activity action type.

    Raises:
        ValueError: If ``action_type`` is not an ActivityType value.
    """
    return ACTIVITY_STYLES[ActivityType(action_type)]


def interview_type_style(interview_type: str | InterviewType) -> EnumStyle:
    """Look up the style for an interview type.

    Raises:
        ValueError: If ``interview_type`` is not an InterviewType value.
    """
    return INTERVIEW_TYPE_STYLES[InterviewType(interview_type)]
