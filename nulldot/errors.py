class NulldotError(ValueError):
    """Base class for codec failures."""


class InvalidConfiguration(NulldotError):
    pass


class InvalidLength(NulldotError):
    pass


class MalformedInput(NulldotError):
    pass


__all__ = ["NulldotError", "InvalidConfiguration", "InvalidLength", "MalformedInput"]
