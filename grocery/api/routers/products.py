from typing import List

from fastapi import APIRouter, Body, Depends, Query

from grocery.api.deps import get_product_service, require_staff
from grocery.domain.schemas import MessageOut, ProductIn, ProductOut, ProductUpdate, StockIn
from grocery.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(
    search: str | None = Query(None),
    in_stock: bool = Query(False, alias="inStock"),
    svc: ProductService = Depends(get_product_service),
):
    return svc.list_products(search=search, in_stock_only=in_stock)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    return svc.get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_staff)])
def create_product(payload: ProductIn, svc: ProductService = Depends(get_product_service)):
    return svc.create_product(payload)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_staff)])
def update_product(product_id: int, payload: ProductUpdate, svc: ProductService = Depends(get_product_service)):
    return svc.update_product(product_id, payload)


@router.post("/{product_id}/stock", response_model=ProductOut, dependencies=[Depends(require_staff)])
def change_stock(
    product_id: int,
    payload: StockIn | None = Body(None),
    svc: ProductService = Depends(get_product_service),
):
    """Toggles availability; an explicit ``inStock`` body sets it instead."""
    return svc.set_in_stock(product_id, payload.in_stock if payload else None)


@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_staff)])
def delete_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    svc.delete_product(product_id)
    return {"message": "Product deleted successfully"}
