# grocery/services/order_service.py
from collections import OrderedDict
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from grocery.data.models.order import OrderModel
from grocery.data.models.order_item import OrderItemModel
from grocery.domain.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from grocery.domain.order_state import (
    NotificationType,
    OrderStatus,
    PaymentStatus,
    PaymentType,
    assert_can_transition,
    parse_payment_status,
    parse_payment_type,
    parse_status,
)
from grocery.repos.address_repo import AddressRepo
from grocery.repos.cart_repo import CartRepo
from grocery.repos.order_repo import OrderRepo
from grocery.repos.product_repo import ProductRepo
from grocery.repos.user_repo import UserRepo
from grocery.services.notification_service import NotificationService
from grocery.services.payments import CheckoutRequest, PaymentGateway, get_gateway
from grocery.services.user_service import STAFF_ROLES
from grocery.utils.logging import get_logger
from grocery.utils.settings import PAYMENT_REDIRECT_URL

logger = get_logger(__name__)

STATS_WINDOW_DAYS = 30


def _page_meta(total: int, page: int, limit: int) -> dict:
    total_pages = (total + limit - 1) // limit
    return {
        "total_orders": total,
        "total_pages": total_pages,
        "current_page": page,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


def _clamp_page(page: int, limit: int) -> tuple[int, int]:
    return max(page, 1), max(min(limit, 100), 1)


class OrderService:
    """
    Order domain: placement from the cart, the status and payment
    lifecycle, gateway webhooks, listings and statistics.

    Every command commits its own transaction first and only then fans out
    notifications, so a notification problem can never undo an order change.
    """

    def __init__(self, db: Session, gateway: PaymentGateway | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.addresses = AddressRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.gateway = gateway or get_gateway()
        self.notification_service = NotificationService(db)

    # commands
    def place_order(
        self,
        user_id: int,
        address_id: int | None,
        payment_type: str | None,
        callback_url: str | None = None,
    ) -> dict:
        """
        Use case: turn the user's cart into an order.

        1. validates address and payment type, the address must be the user's
        2. snapshots every cart line at its current effective price,
           out-of-stock products reject the whole order
        3. for online payment opens a hosted checkout before committing
        4. removes exactly the snapshotted lines and bumps the cart version
           in the same transaction as the order insert; a cart changed in
           the meantime is a ConflictError
        5. notifies sellers and admins
        """
        if not address_id or not payment_type:
            raise ValidationError("Address and payment type are required")
        kind = parse_payment_type(payment_type)

        user = self.users.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        address = self.addresses.get_owned(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")

        cart = self.carts.get_by_user(user_id)
        expected_version = cart.version if cart else None
        items = self.carts.get_cart_items(cart.id) if cart else []
        products = self.products.get_many(i.product_id for i in items)

        lines = []
        unavailable = []
        for i in items:
            product = products.get(i.product_id)
            if product is None:
                continue
            if not product.in_stock:
                unavailable.append(product.name)
                continue
            lines.append(
                OrderItemModel(
                    product_id=product.id,
                    product_name=product.name,
                    unit=product.unit,
                    price=product.effective_price,
                    quantity=i.quantity,
                    product_image=product.image,
                )
            )

        if unavailable:
            raise ValidationError(f"Out of stock: {', '.join(unavailable)}")
        if not lines:
            raise ValidationError("Cart is empty")

        amount = sum((line.price * line.quantity for line in lines), Decimal("0.00"))
        payment_url = None

        try:
            order = self.repo.add_order(
                OrderModel(
                    user_id=user.id,
                    user_full_name=user.full_name,
                    user_email=user.email,
                    address_id=address.id,
                    delivery_address=address.snapshot(),
                    amount=amount,
                    payment_type=kind.value,
                    payment_status=PaymentStatus.PENDING.value,
                    status=OrderStatus.PENDING.value,
                    items=lines,
                )
            )

            if kind is PaymentType.ONLINE:
                checkout = self._open_checkout(order, user, address, callback_url)
                order.tx_ref = checkout.tx_ref
                payment_url = checkout.redirect_url

            self.carts.delete_items([i.id for i in items])
            if not self.carts.bump_version(cart, expected_version):
                logger.info("order_cart_conflict", user_id=user_id, expected=expected_version)
                raise ConflictError("Cart was modified while placing the order, please retry")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "order_placed",
            order_id=order.id,
            user_id=user_id,
            payment_type=kind.value,
            amount=str(amount),
        )

        self.notification_service.notify_staff(
            order.id,
            f"New order #{order.id} from {user.full_name} ({kind.value}, {amount})",
            NotificationType.NEW_ORDER.value,
        )
        return {"order": order, "payment_url": payment_url}

    def _open_checkout(self, order, user, address, callback_url):
        request = CheckoutRequest(
            order_id=order.id,
            amount=order.amount,
            customer_name=user.full_name,
            customer_email=user.email,
            customer_phone=address.phone_number or user.phone_number,
            redirect_url=callback_url or PAYMENT_REDIRECT_URL,
        )
        try:
            checkout = self.gateway.create_hosted_checkout(request)
        except UpstreamError:
            logger.warning("order_checkout_failed", order_id=order.id)
            raise
        except Exception as e:
            logger.warning("order_checkout_failed", order_id=order.id, error=str(e))
            raise UpstreamError(f"Payment initiation failed: {e}")

        if not checkout.redirect_url:
            raise UpstreamError("Payment initiation failed: empty checkout link")
        return checkout

    def cancel_order(self, user_id: int, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")
        if order.status != OrderStatus.PENDING.value:
            raise ValidationError("Only pending orders can be cancelled")

        order.status = OrderStatus.CANCELLED.value
        self.db.commit()
        logger.info("order_cancelled", order_id=order.id, user_id=user_id)

        self.notification_service.notify_staff(
            order.id,
            f"Order #{order.id} was cancelled by the customer",
            NotificationType.STATUS_UPDATE.value,
        )
        return order

    def update_status(self, order_id: int, status: str | None = None, payment_status: str | None = None) -> OrderModel:
        if not status and not payment_status:
            raise ValidationError("Status or payment status is required")

        new_status = parse_status(status) if status else None
        new_payment = parse_payment_status(payment_status) if payment_status else None

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        status_changed = new_status is not None and new_status.value != order.status
        payment_changed = new_payment is not None and new_payment.value != order.payment_status

        if new_status is not None and not status_changed and not payment_changed:
            # re-sending the current status is not a transition
            assert_can_transition(order.status, new_status.value)

        if status_changed:
            assert_can_transition(order.status, new_status.value)
            order.status = new_status.value
        if payment_changed:
            order.payment_status = new_payment.value

        if status_changed or payment_changed:
            self.db.commit()
            logger.info(
                "order_status_updated",
                order_id=order.id,
                status=order.status,
                payment_status=order.payment_status,
            )

        if status_changed:
            self.notification_service.notify(
                [order.user_id],
                order.id,
                f"Your order #{order.id} is now {order.status}",
                NotificationType.STATUS_UPDATE.value,
            )
        if payment_changed:
            self.notification_service.notify(
                [order.user_id],
                order.id,
                f"Payment for order #{order.id} is {order.payment_status}",
                NotificationType.PAYMENT_UPDATE.value,
            )
        return order

    def confirm_cash_payment(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.payment_type != PaymentType.CASH.value:
            raise ValidationError("Only cash orders can be confirmed manually")
        if order.status == OrderStatus.CANCELLED.value:
            raise ValidationError("Cannot confirm payment for a cancelled order")

        if order.payment_status == PaymentStatus.COMPLETED.value:
            return order

        order.payment_status = PaymentStatus.COMPLETED.value
        self.db.commit()
        logger.info("cash_payment_confirmed", order_id=order.id)

        self.notification_service.notify(
            [order.user_id],
            order.id,
            f"Cash payment for order #{order.id} was confirmed",
            NotificationType.PAYMENT_UPDATE.value,
        )
        return order

    def handle_payment_webhook(self, signature: str | None, payload: dict) -> tuple[str, OrderModel | None]:
        """
        Apply a gateway webhook. Returns ``(outcome, order)`` where outcome is
        one of ``completed``, ``failed``, ``refund_required``, ``ignored`` or
        ``duplicate``.

        A failed charge leaves the order pending because the customer can
        retry on the same hosted checkout; unpaid orders are cancelled by the
        expiry task. Money arriving for an order that is already cancelled is
        recorded and flagged to staff for a refund.
        """
        if not self.gateway.verify_webhook_signature(signature):
            raise UnauthorizedError("Invalid webhook signature")

        data = (payload or {}).get("data") or {}
        transaction_id = data.get("id")
        tx_ref = data.get("tx_ref")
        if not transaction_id or not tx_ref:
            raise ValidationError("Webhook payload is missing the transaction id or reference")

        gateway_status = self.gateway.verify_transaction(str(transaction_id))

        order = self.repo.get_by_tx_ref(tx_ref)
        if not order:
            raise NotFoundError("Order not found for this transaction")

        event = payload.get("event")
        log = logger.bind(order_id=order.id, tx_ref=tx_ref, gateway_status=gateway_status)

        if event == "charge.completed" and gateway_status == "successful":
            if order.payment_status == PaymentStatus.COMPLETED.value:
                log.info("payment_webhook_duplicate")
                return "duplicate", order
            order.payment_status = PaymentStatus.COMPLETED.value
            order.gateway_transaction_id = str(transaction_id)
            if order.status == OrderStatus.CANCELLED.value:
                outcome = "refund_required"
                message = f"Payment for cancelled order #{order.id} was received and must be refunded"
            else:
                if order.status == OrderStatus.PENDING.value:
                    order.status = OrderStatus.PROCESSING.value
                outcome = "completed"
                message = f"Payment for order #{order.id} was received"
        elif gateway_status == "failed":
            if order.payment_status in (PaymentStatus.FAILED.value, PaymentStatus.COMPLETED.value):
                log.info("payment_webhook_duplicate")
                return "duplicate", order
            order.payment_status = PaymentStatus.FAILED.value
            outcome = "failed"
            message = f"Payment for order #{order.id} failed"
        else:
            log.info("payment_webhook_ignored", webhook_event=event)
            return "ignored", order

        self.db.commit()
        if outcome == "refund_required":
            log.warning("payment_webhook_refund_required")
        else:
            log.info("payment_webhook_applied", outcome=outcome)

        self.notification_service.notify(
            [order.user_id], order.id, message, NotificationType.PAYMENT_UPDATE.value
        )
        self.notification_service.notify_staff(order.id, message, NotificationType.PAYMENT_UPDATE.value)
        return outcome, order

    def expire_unpaid_online_orders(self, cutoff: datetime) -> int:
        orders = self.repo.unpaid_online_before(cutoff)
        for order in orders:
            order.status = OrderStatus.CANCELLED.value
            order.payment_status = PaymentStatus.FAILED.value
        self.db.commit()

        for order in orders:
            logger.info("order_payment_expired", order_id=order.id)
            self.notification_service.notify(
                [order.user_id],
                order.id,
                f"Order #{order.id} was cancelled because payment was not completed in time",
                NotificationType.STATUS_UPDATE.value,
            )
        return len(orders)

    # queries
    def get_user_orders(self, user_id: int, page: int = 1, limit: int = 10) -> dict:
        page, limit = _clamp_page(page, limit)
        orders, total = self.repo.page((page - 1) * limit, limit, user_id=user_id)
        return {"orders": orders, "pagination": _page_meta(total, page, limit)}

    def get_order_details(self, user_id: int, role: str, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        # customers only ever learn about their own orders
        if not order or (role not in STAFF_ROLES and order.user_id != user_id):
            raise NotFoundError("Order not found")
        return order

    def get_all_orders(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        page, limit = _clamp_page(page, limit)
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc) if start_date else None
        # end date counts through the end of that day
        end = datetime.combine(end_date, time.max, tzinfo=timezone.utc) if end_date else None
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")

        orders, total = self.repo.page(
            (page - 1) * limit,
            limit,
            search=search.strip() if search else None,
            start=start,
            end=end,
        )
        return {"orders": orders, "pagination": _page_meta(total, page, limit)}

    def get_statistics(self) -> dict:
        status_counts = {s.value: 0 for s in OrderStatus}
        status_counts.update(self.repo.count_by(OrderModel.status))
        payment_counts = {s.value: 0 for s in PaymentStatus}
        payment_counts.update(self.repo.count_by(OrderModel.payment_status))

        since = datetime.now(timezone.utc) - timedelta(days=STATS_WINDOW_DAYS)
        daily = OrderedDict()
        for order in self.repo.created_since(since):
            day = order.created_at.date()
            stat = daily.setdefault(day, {"day": day, "orders": 0, "revenue": Decimal("0.00")})
            stat["orders"] += 1
            if order.status != OrderStatus.CANCELLED.value:
                stat["revenue"] += order.amount

        return {
            "total_orders": self.repo.count_all(),
            "status_counts": status_counts,
            "payment_status_counts": payment_counts,
            "total_revenue": Decimal(str(self.repo.revenue_excluding(OrderStatus.CANCELLED.value))),
            "daily_stats": list(daily.values()),
        }
