"""Exception hierarchy shared by the diagram core and its hosts."""


class LyrichordError(Exception):
    """Base class for every error raised by lyrichord."""


class InvalidStringError(LyrichordError, ValueError):
    """A string number outside 1..6 was supplied."""

    def __init__(self, string: int) -> None:
        super().__init__(f"Guitar string must be in 1..6, got {string}.")
        self.string = string


class FretOutOfRangeError(LyrichordError, ValueError):
    """A fret number is negative or beyond the fretboard limit."""

    def __init__(self, fret: int, limit: int) -> None:
        super().__init__(f"Fret must be in 0..{limit - 1}, got {fret}.")
        self.fret = fret
        self.limit = limit


class ConflictingPositionError(LyrichordError):
    """A second fret was placed on a string that is already fretted."""

    def __init__(self, string: int, existing_fret: int, new_fret: int) -> None:
        super().__init__(
            f"String {string} already holds fret {existing_fret}; cannot also place fret {new_fret}."
        )
        self.string = string
        self.existing_fret = existing_fret
        self.new_fret = new_fret


class FretShiftError(LyrichordError):
    """A whole-chord fret shift would push a note off the fretboard."""


class ConfigError(LyrichordError):
    """The configuration file is missing or holds unusable values."""


class StateFileError(LyrichordError):
    """The persisted application state cannot be read or validated."""
