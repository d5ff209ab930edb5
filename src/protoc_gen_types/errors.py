"""Exceptions raised while configuring or running a generation pass.

Every error here is fatal to the whole pass. Nothing is retried: the transform
is deterministic, so an error always points at the configuration or the input
descriptors.
"""


class ProtocTypesError(ValueError):
    """Base class for all generator errors."""


class OptionError(ProtocTypesError):
    """Raised when the plugin parameter cannot be turned into options."""


class InvalidOptionValueError(OptionError):
    """Raised when a recognized option key has a value outside its accepted set."""

    def __init__(self, key: str, value: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.value = value


class UnknownOptionError(OptionError):
    """Raised when the parameter names an option nobody recognizes."""

    def __init__(self, key: str) -> None:
        super().__init__(f'unknown option "{key}"')
        self.key = key


class DescriptorError(ProtocTypesError):
    """Raised when the descriptor input cannot be assembled into a model.

    This covers dangling type references and missing dependencies only; schema
    correctness is the compiler's job.
    """
