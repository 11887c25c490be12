"""Alert side-effect surface"""

from abc import ABC, abstractmethod

import structlog

from app.schemas.waiter_call import WaiterCall

logger = structlog.get_logger()


class AlertSink(ABC):
    """Receives "new order" and "waiter call" triggers from the feed"""

    @abstractmethod
    def new_order(self) -> None:
        pass

    @abstractmethod
    def waiter_call(self, call: WaiterCall) -> None:
        pass


class LoggingAlertSink(AlertSink):
    """Alert sink that only writes log events"""

    def new_order(self) -> None:
        logger.info("New order arrived")

    def waiter_call(self, call: WaiterCall) -> None:
        logger.info("Waiter call pending", table_id=call.table_id or "unknown", call_id=call.id)
