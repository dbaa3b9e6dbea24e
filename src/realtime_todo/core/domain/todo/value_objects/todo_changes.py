from dataclasses import dataclass


@dataclass(frozen=True)
class TodoChanges:
    """Partial update payload. ``None`` means "leave the field untouched"."""

    description: str | None = None
    completed: bool | None = None
