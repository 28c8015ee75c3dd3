class ConfigurationError(ValueError):
    """Raised when user scheduling settings are missing or malformed.

    Fatal: aborts the placement call (and any batch it belongs to) before any
    event is considered.
    """

    pass


class InvalidRequestError(ValueError):
    """Raised when a placement request payload cannot be turned into events."""

    pass


# Mapping of exceptions to CLI exit codes (placement failures exit with 1)
EXIT_CODES = {
    ConfigurationError: 2,
    InvalidRequestError: 2,
}
