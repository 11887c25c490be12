"""Domain errors raised by the ordering engine"""


class OrderingError(Exception):
    """Base class for errors scoped to one attempted operation"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(OrderingError):
    """Request rejected before any write was attempted"""


class NotFoundError(OrderingError):
    """Referenced order, call or open tab does not exist"""


class CooldownError(OrderingError):
    """Table is calling a waiter again too soon"""

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after
