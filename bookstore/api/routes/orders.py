"""
Order API Routes

Checkout, payment and order history for the authenticated user.
"""

from fastapi import APIRouter, Depends, status

from bookstore.api.dependencies import get_current_user_id, get_order_service
from bookstore.api.schemas import CreateOrderRequest, OrderResponse, WebResponse
from bookstore.services import LineItem, OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_model=WebResponse[OrderResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    request: CreateOrderRequest,
    user_id: int = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service),
):
    """
    Place a pending order.

    At most 5 books per order across all lines. Prices are fixed at this
    point; the order must be paid before it expires.
    """
    items = [LineItem(book_id=i.book_id, quantity=i.quantity) for i in request.items]
    order = await service.create_order(user_id, items)
    return WebResponse(data=OrderResponse.from_order(order), message="order created")


@router.post(
    "/{order_id}/pay",
    response_model=WebResponse[OrderResponse],
    response_model_exclude_none=True,
)
async def pay_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service),
):
    """Pay one of the caller's pending orders."""
    order = await service.pay_order(order_id, user_id)
    return WebResponse(data=OrderResponse.from_order(order), message="order paid")


@router.get(
    "",
    response_model=WebResponse[list[OrderResponse]],
    response_model_exclude_none=True,
)
async def list_orders(
    user_id: int = Depends(get_current_user_id),
    service: OrderService = Depends(get_order_service),
):
    """The caller's orders, newest first."""
    orders = await service.list_orders_by_user(user_id)
    return WebResponse(data=[OrderResponse.from_order(o) for o in orders])
