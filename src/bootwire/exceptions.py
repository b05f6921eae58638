"""Exception hierarchy for the bootstrap layer."""


class BootwireError(Exception):
    """Base class for all bootwire errors."""
    pass


class UnknownApplicationError(BootwireError):
    """Raised when no usable application service is registered."""
    pass


class EmptyServiceNameError(BootwireError):
    """Raised when a service provider reports an empty name."""
    pass


class ServiceNotFoundError(BootwireError, KeyError):
    """Raised when a service is requested that the container does not know."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class UnknownProviderError(BootwireError):
    """Raised when a provider name is not in the registry."""
    pass


class UnknownStreamError(BootwireError):
    """Raised when the logger provider is configured with an unknown stream."""
    pass


class MalformedFragmentError(BootwireError):
    """Raised in strict mode when a configuration fragment cannot be used."""
    pass


class UnknownAdapterError(BootwireError):
    """Raised when a database adapter has no registered connection factory."""
    pass


class DatabaseConfigError(BootwireError):
    """Raised when database settings in the environment are incomplete or invalid."""
    pass
