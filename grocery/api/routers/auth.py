from fastapi import APIRouter, Depends

from grocery.api.deps import get_user_service
from grocery.domain.schemas import LoginIn, RegisterIn, TokenOut
from grocery.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenOut, status_code=201)
def register(payload: RegisterIn, svc: UserService = Depends(get_user_service)):
    user, token = svc.register(payload)
    return {"access_token": token, "user": user}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, svc: UserService = Depends(get_user_service)):
    user, token = svc.login(payload)
    return {"access_token": token, "user": user}
