from enum import Enum


class UploadAction(int, Enum):
    """What happens to the local file once it has been uploaded."""

    COPY = 0
    MOVE = 1
    FORGET = 2
    DELETE = 3

    @classmethod
    def from_name(cls, name: str) -> "UploadAction":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown upload action: {name!r}") from None
