# grocery/api/routers/carts.py
from fastapi import APIRouter, Depends

from grocery.api.deps import get_cart_service, get_current_user
from grocery.data.models.user import UserModel
from grocery.domain.schemas import CartItemIn, CartOut, CartQuantityIn
from grocery.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user.id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    """Adds a product, or increments its quantity when it is already in the cart."""
    return svc.add_product(user.id, payload.product_id, payload.quantity)


@router.put("/update/{product_id}", response_model=CartOut)
def update_quantity(
    product_id: int,
    payload: CartQuantityIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.set_quantity(user.id, product_id, payload.quantity)


@router.delete("/remove/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_product(user.id, product_id)


@router.delete("/clear", response_model=CartOut)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.clear(user.id)
