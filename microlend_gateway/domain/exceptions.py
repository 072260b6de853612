"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UserNotFoundError(DomainException):
    """Referenced user does not exist"""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class DataUnavailableError(DomainException):
    """Repository read failed (timeout, connection loss, bad row)"""

    pass


class ExtensionLimitError(DomainException):
    """Loan already used all of its due-date extensions"""

    pass


class LoanNotFoundError(DomainException):
    """Referenced loan does not exist"""

    def __init__(self, loan_id: str):
        super().__init__(f"Loan {loan_id} not found")
        self.loan_id = loan_id
