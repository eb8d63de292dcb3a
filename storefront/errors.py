"""Exceptions shared across the services."""


class NotFoundError(LookupError):
    """A requested record does not exist."""


class InvalidArgumentError(ValueError):
    """A request carried missing or malformed data."""