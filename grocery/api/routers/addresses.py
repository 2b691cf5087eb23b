# grocery/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends

from grocery.api.deps import get_address_service, get_current_user
from grocery.data.models.user import UserModel
from grocery.domain.schemas import AddressIn, AddressOut, AddressUpdate, MessageOut
from grocery.services.address_service import AddressService

router = APIRouter(prefix="/address", tags=["address"])


@router.post("/create", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressIn,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_address_service),
):
    return svc.create_address(user.id, payload)


@router.get("/allAddress", response_model=List[AddressOut])
def all_addresses(
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_address_service),
):
    return svc.list_addresses(user.id)


@router.put("/update/{address_id}", response_model=AddressOut)
def update_address(
    address_id: int,
    payload: AddressUpdate,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_address_service),
):
    return svc.update_address(user.id, address_id, payload)


@router.put("/setDefault/{address_id}", response_model=AddressOut)
def set_default(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_address_service),
):
    return svc.set_default(user.id, address_id)


@router.delete("/delete/{address_id}", response_model=MessageOut)
def delete_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_address_service),
):
    svc.delete_address(user.id, address_id)
    return {"message": "Address deleted"}
