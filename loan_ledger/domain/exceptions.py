"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmountError(DomainException):
    """Stored amount is not a finite number"""

    pass


class InvalidLoanRecordError(DomainException):
    """Stored loan record cannot be turned into loan terms"""

    pass
