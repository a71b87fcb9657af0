"""Exception types raised by the viability pipeline."""


class ViabilityAnalysisError(Exception):
    """Base class for errors raised by cck8_viability."""


class MissingRequiredGroupError(ViabilityAnalysisError, ValueError):
    """The dataset lacks a Blank or Control group after grouping."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required group(s): {', '.join(self.missing)}. "
            "A Blank and a Control group are both needed."
        )


class InvalidDataFormatError(ViabilityAnalysisError, ValueError):
    """An input file could not be turned into viability readings."""
