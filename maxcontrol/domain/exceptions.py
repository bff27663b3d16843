"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInstallmentCountError(DomainException):
    """Installment count below one was requested"""

    pass


class InvalidLineItemError(DomainException):
    """Quote line item has non-positive quantity or dimensions"""

    pass


class EntryNotFoundError(DomainException):
    """Accounts payable entry does not exist"""

    pass
