from logging import Logger

__all__ = [
    "ParamError",
    "InputError",
    "PloidyParseError",
    "FieldCountError",
    "InvalidCoordinatesError",
    "InvalidPloidyError",
]


class ParamError(Exception):
    pass


class InputError(Exception):
    pass


class PloidyParseError(ValueError):
    """
    Fatal error for a ploidy table line which could not be parsed. Malformed rules are never skipped, since a silently
    dropped rule would change the ploidy used downstream.
    """

    hint: str = "Ploidy table lines must have the form: CHROM START END SEX PLOIDY"

    def __init__(self, reason: str, line: str, line_no: int | None = None, hint: str | None = None):
        self.reason: str = reason
        self.line: str = line
        self.line_no: int | None = line_no
        if hint is not None:
            self.hint = hint

        location = f" on line {line_no}" if line_no is not None else ""
        super().__init__(f"Could not parse ploidy table{location}: {reason}: '{line}'")

    def log_error(self, logger: Logger) -> None:
        logger.critical(str(self))
        logger.critical(self.hint)


class FieldCountError(PloidyParseError):
    pass


class InvalidCoordinatesError(PloidyParseError):
    hint = "Ploidy table START and END must be integers, with START <= END (1-based) or START < END (0-based)"


class InvalidPloidyError(PloidyParseError):
    hint = "Ploidy table PLOIDY values must be base-10 integers"
