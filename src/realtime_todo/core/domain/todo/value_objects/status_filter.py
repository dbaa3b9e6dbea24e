from enum import StrEnum, auto


class StatusFilter(StrEnum):
    ALL = auto()
    ACTIVE = auto()
    COMPLETED = auto()
