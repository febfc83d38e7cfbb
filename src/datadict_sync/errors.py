"""Exceptions raised by the synchronization core."""


class ParseError(ValueError):
    """Text could not be converted into a data dictionary."""


class IdNotFoundError(LookupError):
    """A dictionary id is not present in the data dictionary."""

    def __init__(self, dictionary_id: str | None) -> None:
        super().__init__(f"Dictionary id {dictionary_id!r} not found")
        self.dictionary_id = dictionary_id
