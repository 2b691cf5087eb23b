from fastapi import APIRouter, Depends

from grocery.api.deps import get_current_user
from grocery.data.models.user import UserModel
from grocery.domain.schemas import UserOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def me(user: UserModel = Depends(get_current_user)):
    return user
