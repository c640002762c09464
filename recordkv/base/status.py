import enum


class Status(enum.Enum):
    """Outcome of one adapter call as seen by the benchmark harness."""

    OK = 0
    ERROR = 1
