class TourGAError(ValueError):
    """Base class for user-facing failures raised before evolution starts."""


class MalformedInputError(TourGAError):
    """City input is missing, empty, too small, or has a bad coordinate."""


class ConfigurationError(TourGAError):
    """A run parameter lies outside its valid domain."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
