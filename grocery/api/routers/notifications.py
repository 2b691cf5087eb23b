from fastapi import APIRouter, Depends, Query

from grocery.api.deps import get_notification_service, require_staff
from grocery.data.models.user import UserModel
from grocery.domain.schemas import NotificationOut, NotificationPageOut
from grocery.services.notification_service import NotificationService

router = APIRouter(prefix="/order/notifications", tags=["notifications"])


@router.get("", response_model=NotificationPageOut)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserModel = Depends(require_staff),
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.list_for(user.id, page, limit)


@router.put("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: int,
    user: UserModel = Depends(require_staff),
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.mark_read(user.id, notification_id)


@router.delete("/clear-read")
def clear_read(
    user: UserModel = Depends(require_staff),
    svc: NotificationService = Depends(get_notification_service),
):
    deleted = svc.clear_read(user.id)
    return {"success": True, "deleted": deleted, "message": f"Cleared {deleted} read notifications"}
