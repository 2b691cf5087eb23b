from fastapi import APIRouter, Depends, Query

from grocery.api.deps import get_customer_service, get_order_service, require_admin
from grocery.domain.schemas import CustomerDetailOut, CustomerPageOut, OrderPageOut
from grocery.services.customer_service import CustomerService
from grocery.services.order_service import OrderService

router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(require_admin)])


@router.get("", response_model=CustomerPageOut)
def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None),
    svc: CustomerService = Depends(get_customer_service),
):
    return svc.list_customers(page, limit, search)


@router.get("/{customer_id}", response_model=CustomerDetailOut)
def get_customer(customer_id: int, svc: CustomerService = Depends(get_customer_service)):
    return svc.get_customer_details(customer_id)


@router.get("/{customer_id}/orders", response_model=OrderPageOut)
def get_customer_orders(
    customer_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: CustomerService = Depends(get_customer_service),
    orders: OrderService = Depends(get_order_service),
):
    customer = svc.get_customer(customer_id)
    return orders.get_user_orders(customer.id, page, limit)
