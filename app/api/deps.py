"""Shared API dependencies"""

from fastapi import Request

from app.feed.controller import OrderFeedController, WaiterCallFeedController
from app.runtime import Runtime
from app.services.order_service import OrderService
from app.services.waiter_call_service import WaiterCallService


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def get_order_service(request: Request) -> OrderService:
    return get_runtime(request).orders


def get_waiter_call_service(request: Request) -> WaiterCallService:
    return get_runtime(request).waiter_calls


def get_orders_feed(request: Request) -> OrderFeedController:
    return get_runtime(request).orders_feed


def get_calls_feed(request: Request) -> WaiterCallFeedController:
    return get_runtime(request).calls_feed
