# grocery/api/routers/orders.py
from datetime import date

from fastapi import APIRouter, Body, Depends, Header, Query

from grocery.api.deps import get_current_user, get_order_service, require_staff
from grocery.data.models.user import UserModel
from grocery.domain.schemas import (
    OrderOut,
    OrderPageOut,
    OrderStatisticsOut,
    OrderStatusUpdateIn,
    PlaceOrderIn,
    PlaceOrderOut,
)
from grocery.services.order_service import OrderService

router = APIRouter(prefix="/order", tags=["order"])


# customer
@router.post("/placeOrder", response_model=PlaceOrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    """
    Creates an order from the current cart.
    For online payment the response carries the hosted checkout url.
    """
    result = svc.place_order(user.id, payload.address_id, payload.payment_type, payload.callback_url)
    return {"order": result["order"], "payment_url": result["payment_url"]}


@router.get("/getUserOrders", response_model=OrderPageOut)
def get_user_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_user_orders(user.id, page, limit)


@router.get("/getOrderDetails/{order_id}", response_model=OrderOut)
def get_order_details(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order_details(user.id, user.role, order_id)


@router.put("/cancelOrder/{order_id}", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    return svc.cancel_order(user.id, order_id)


# payment gateway
@router.post("/flw-webhook")
def payment_webhook(
    payload: dict = Body(...),
    verif_hash: str | None = Header(None, alias="verif-hash"),
    svc: OrderService = Depends(get_order_service),
):
    outcome, order = svc.handle_payment_webhook(verif_hash, payload)
    return {"success": True, "outcome": outcome, "orderId": order.id if order else None}


# seller / admin
@router.get("/getAllOrders", response_model=OrderPageOut, dependencies=[Depends(require_staff)])
def get_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_all_orders(page, limit, search, start_date, end_date)


@router.get("/admin/getOrderDetails/{order_id}", response_model=OrderOut)
def admin_get_order_details(
    order_id: int,
    user: UserModel = Depends(require_staff),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order_details(user.id, user.role, order_id)


@router.get("/getOrderStatistics", response_model=OrderStatisticsOut, dependencies=[Depends(require_staff)])
def get_order_statistics(svc: OrderService = Depends(get_order_service)):
    return svc.get_statistics()


@router.put("/updateOrderStatus/{order_id}", response_model=OrderOut, dependencies=[Depends(require_staff)])
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdateIn,
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_status(order_id, payload.status, payload.payment_status)


@router.put("/confirmCashPayment/{order_id}", response_model=OrderOut, dependencies=[Depends(require_staff)])
def confirm_cash_payment(order_id: int, svc: OrderService = Depends(get_order_service)):
    return svc.confirm_cash_payment(order_id)
