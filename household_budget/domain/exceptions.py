"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownIncomeSourceError(DomainException):
    """Transaction references an income source that was not supplied"""

    pass


class DuplicateAccountError(DomainException):
    """Two debt accounts share an id, so allocations cannot be matched back"""

    pass
