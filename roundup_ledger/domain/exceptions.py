"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Rule period or numeric configuration is unusable; fails the whole call"""

    pass


class InvalidInputError(DomainException):
    """Scalar input (age, wage) is out of range for a projection"""

    pass
