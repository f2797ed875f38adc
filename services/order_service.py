"""
Order request handling: place, cancel, reorder and query quick and plan
orders.

Every read path runs ``advance`` on the orders it returns, the same
transition step the sweeper applies, so a client watching an order sees it
progress even between sweeps.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID
from datetime import datetime, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
import re

from adapters.broadcast import Broadcaster, user_room
from app.clock import as_naive_utc
from app.config import Settings, settings as default_settings
from app.exceptions import (
    NotFoundError,
    ForbiddenError,
    ServiceValidationError,
    CancellationWindowExpired,
    OrderAlreadyFinalized,
    QuotaExhaustedError,
)
from domain.catalog import find_item, plan_categories
from domain.enums import (
    OrderVariant,
    QuickOrderStatus,
    PlanOrderStatus,
    TERMINAL_STATUSES,
)
from domain.mappers import OrderMapper
from domain.models import AppUser, MealOrder
from domain.schemas.order_schemas import (
    MealSelection,
    QuickOrderCreate,
    PlanOrderCreate,
    PlanOrderPlacedResponse,
)
from repositories import OrderRepository, UserRepository
from services.lifecycle import (
    build_schedules,
    compute_status,
    is_terminal,
    statuses_for,
    transition_message,
)
from services.notification_service import NotificationEmitter
from services.quota_service import BoxQuotaLedger

logger = logging.getLogger("puttybox.orders")

ORDER_CREATED_EVENT = "orderCreated"
ORDER_CANCELLED_EVENT = "orderCancelled"
ORDER_UPDATED_EVENT = "orderUpdated"

PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")


def normalize_phone(raw: str) -> str:
    """
    Validate an Indian mobile number and return its 10-digit form.

    Spaces, dashes and a leading +91 are tolerated.

    Raises:
        ServiceValidationError: if the number is not a valid mobile number
    """
    digits = re.sub(r"[\s\-()]", "", raw or "")
    if digits.startswith("+91"):
        digits = digits[3:]
    if not PHONE_PATTERN.match(digits):
        raise ServiceValidationError(
            "Invalid phone number: expected a 10-digit mobile number starting with 6-9",
            details={"phone": raw},
        )
    return digits


def delivery_charge_for(subtotal: Decimal, premium: bool, cfg: Settings) -> Decimal:
    """Tiered delivery surcharge, waived for premium members"""
    if premium:
        return Decimal("0")
    if subtotal < Decimal(str(cfg.delivery_tier_low)):
        return Decimal(str(cfg.delivery_charge_low))
    if subtotal < Decimal(str(cfg.delivery_tier_high)):
        return Decimal(str(cfg.delivery_charge_mid))
    return Decimal("0")


def validate_selection(plan_type: str, selected: Dict[str, MealSelection]) -> Dict[str, dict]:
    """
    Check a plan order's meal choices against the catalog.

    Returns:
        Category -> catalog item, in the plan's category order

    Raises:
        ServiceValidationError: unknown plan, missing or unknown categories,
            or an item that is not on that category's menu
    """
    categories = plan_categories(plan_type)
    if not categories:
        raise ServiceValidationError(f"Unknown plan type: {plan_type}")

    missing = [c for c in categories if c not in selected]
    unknown = [c for c in selected if c not in categories]
    if missing or unknown:
        raise ServiceValidationError(
            "Select exactly one meal for each category of the plan",
            details={"missing": missing, "unknown": unknown},
        )

    ordered: Dict[str, dict] = {}
    for category in categories:
        choice = selected[category]
        name = choice.name if isinstance(choice, MealSelection) else str(choice)
        item = find_item(plan_type, category, name)
        if item is None:
            raise ServiceValidationError(
                f"'{name}' is not on the {category} menu of the {plan_type} plan"
            )
        ordered[category] = dict(item)
    return ordered


class OrderService:
    """Order placement, cancellation and status progression"""

    def __init__(
        self,
        emitter: NotificationEmitter,
        broadcaster: Optional[Broadcaster] = None,
        cfg: Settings = default_settings,
    ):
        self.emitter = emitter
        self.broadcaster = broadcaster or emitter.broadcaster
        self.settings = cfg
        self.schedules = build_schedules(cfg)
        self.cancel_window = timedelta(seconds=cfg.cancel_window_sec)

    # ------------------------------------------------------------------
    # Status progression (shared with the sweeper)
    # ------------------------------------------------------------------

    def advance(self, db: Session, order: MealOrder, now: datetime) -> bool:
        """
        Move an order to its time-derived status if it is behind.

        The write is a compare-and-set on the status that was read, so a
        concurrent cancel or a racing sweeper cannot be overwritten and only
        the winning writer announces the transition.

        Returns:
            True if this call changed the stored status
        """
        previous = order.status
        target = compute_status(
            order.variant, order.created_at, previous, now, self.schedules
        )
        if target == previous:
            return False

        changed = OrderRepository(db).compare_and_set_status(
            order.order_id, [previous], target
        )
        db.refresh(order)
        if not changed:
            logger.debug(
                f"order_advance_skipped order_id={order.order_id} "
                f"expected={previous} found={order.status}"
            )
            return False

        logger.info(
            f"order_status_changed order_id={order.order_id} "
            f"variant={OrderVariant(order.variant).value} from={previous} to={target}"
        )
        self._notify_safely(db, order.user_id, transition_message(order, target), now)
        self._emit_order_event(ORDER_UPDATED_EVENT, order)
        return True

    def refresh_statuses(
        self, db: Session, orders: Iterable[MealOrder], now: datetime
    ) -> List[MealOrder]:
        """Advance every non-terminal order in place; failures keep the stored status"""
        orders = list(orders)
        for order in orders:
            if is_terminal(order.status):
                continue
            try:
                self.advance(db, order, now)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.warning(
                    f"order_refresh_failed order_id={order.order_id} error={exc}"
                )
        return orders

    # ------------------------------------------------------------------
    # Quick orders
    # ------------------------------------------------------------------

    def place_quick_order(
        self, db: Session, user_id: UUID, data: QuickOrderCreate, now: datetime
    ) -> MealOrder:
        """Create a quick order, notify the owner and broadcast it"""
        user = self._get_user(db, user_id)
        phone = normalize_phone(data.phone)

        subtotal = sum(
            (item.price * item.quantity for item in data.items), Decimal("0")
        )
        delivery_charge = delivery_charge_for(
            subtotal, user.has_valid_premium(now), self.settings
        )

        order = MealOrder(
            variant=OrderVariant.QUICK,
            user_id=user.user_id,
            user_name=user.full_name,
            user_email=user.email,
            created_at=now,
            status=QuickOrderStatus.PENDING.value,
            meal_type=data.meal_type.value,
            items=[item.model_dump(mode="json") for item in data.items],
            subtotal=subtotal,
            delivery_charge=delivery_charge,
            total=subtotal + delivery_charge,
            address=data.address,
            phone=phone,
            payment_method=data.payment_method.value,
        )
        OrderRepository(db).create(order)

        logger.info(
            f"order_placed order_id={order.order_id} user_id={user_id} variant=quick "
            f"items={len(data.items)} subtotal={subtotal} delivery={delivery_charge}"
        )

        self._notify_safely(
            db,
            user.user_id,
            f"Your order #{order.order_id} has been placed successfully!",
            now,
        )
        self._emit_order_event(ORDER_CREATED_EVENT, order)
        return order

    # ------------------------------------------------------------------
    # Plan orders
    # ------------------------------------------------------------------

    def place_plan_order(
        self, db: Session, user_id: UUID, data: PlanOrderCreate, now: datetime
    ) -> PlanOrderPlacedResponse:
        """Schedule a plan order against the user's box allotment"""
        user = self._get_user(db, user_id)
        plan_type = data.plan_type.value
        selected = validate_selection(plan_type, data.selected_meals)

        order = self._create_plan_order(
            db, user, plan_type, selected, data.protein_target, now
        )
        self._notify_safely(
            db,
            user.user_id,
            f"Your {plan_type} meal customization has been saved successfully!",
            now,
        )
        self._emit_order_event(ORDER_CREATED_EVENT, order)
        return self._plan_response(db, user, order, "Meal order saved successfully")

    def reorder_plan_order(
        self, db: Session, user_id: UUID, order_id: UUID, now: datetime
    ) -> PlanOrderPlacedResponse:
        """Schedule a copy of an earlier plan order"""
        original = OrderRepository(db).get_by_id_and_variant(order_id, OrderVariant.PLAN)
        if not original:
            raise NotFoundError(f"Original order {order_id} not found")
        if original.user_id != user_id:
            raise ForbiddenError("Cannot reorder another user's order")

        user = self._get_user(db, user_id)
        order = self._create_plan_order(
            db,
            user,
            original.plan_type,
            dict(original.selected_meals or {}),
            original.protein_target,
            now,
        )
        self._notify_safely(
            db,
            user.user_id,
            f"Your {original.plan_type} meal has been re-scheduled successfully!",
            now,
        )
        self._emit_order_event(ORDER_CREATED_EVENT, order)
        return self._plan_response(db, user, order, "Reorder placed successfully")

    def _create_plan_order(
        self,
        db: Session,
        user: AppUser,
        plan_type: str,
        selected: Dict[str, dict],
        protein_target: Optional[Decimal],
        now: datetime,
    ) -> MealOrder:
        quota = BoxQuotaLedger.query(db, user.user_id)
        if quota.remaining_boxes <= 0:
            logger.warning(
                f"plan_order_rejected user_id={user.user_id} reason=no_boxes "
                f"total={quota.total_boxes} delivered={quota.delivered_boxes}"
            )
            raise QuotaExhaustedError(
                details={
                    "total_boxes": quota.total_boxes,
                    "delivered_boxes": quota.delivered_boxes,
                }
            )

        order = MealOrder(
            variant=OrderVariant.PLAN,
            user_id=user.user_id,
            user_name=user.full_name,
            user_email=user.email,
            created_at=now,
            status=PlanOrderStatus.SCHEDULED.value,
            items=[],
            subtotal=Decimal("0"),
            delivery_charge=Decimal("0"),
            total=Decimal("0"),
            plan_type=plan_type,
            selected_meals=selected,
            protein_target=protein_target,
        )
        OrderRepository(db).create(order)

        # The order is committed before the box is taken; the two writes are
        # not atomic and a failure here leaves the order without a box.
        try:
            BoxQuotaLedger.consume(db, user.user_id)
        except Exception:
            db.rollback()
            logger.exception(
                f"box_consume_failed order_id={order.order_id} user_id={user.user_id}"
            )

        logger.info(
            f"order_placed order_id={order.order_id} user_id={user.user_id} "
            f"variant=plan plan_type={plan_type}"
        )
        return order

    def _plan_response(
        self, db: Session, user: AppUser, order: MealOrder, message: str
    ) -> PlanOrderPlacedResponse:
        db.refresh(user)
        return PlanOrderPlacedResponse(
            message=message,
            order=OrderMapper.to_response(order),
            delivered_boxes=user.delivered_boxes or 0,
            total_boxes=user.total_boxes or 0,
            remaining_boxes=user.remaining_boxes,
        )

    # ------------------------------------------------------------------
    # Shared order operations
    # ------------------------------------------------------------------

    def cancel_order(
        self,
        db: Session,
        user_id: UUID,
        order_id: UUID,
        variant: OrderVariant,
        now: datetime,
    ) -> MealOrder:
        """
        Cancel an order within the cancellation window.

        Raises:
            NotFoundError: unknown order (or another user's quick order)
            ForbiddenError: another user's plan order
            OrderAlreadyFinalized: order is delivered or cancelled
            CancellationWindowExpired: order is older than the window
        """
        repo = OrderRepository(db)
        order = repo.get_by_id_and_variant(order_id, variant)
        if not order or (variant == OrderVariant.QUICK and order.user_id != user_id):
            raise NotFoundError(f"Order {order_id} not found")
        if order.user_id != user_id:
            raise ForbiddenError("Cannot cancel another user's order")

        self._ensure_cancellable(order, now)

        active = [s for s in statuses_for(variant) if s not in TERMINAL_STATUSES]
        if not repo.compare_and_set_status(order.order_id, active, "cancelled"):
            db.refresh(order)
            raise OrderAlreadyFinalized(
                f"Order is already {order.status}"
            )
        db.refresh(order)

        logger.info(
            f"order_cancelled order_id={order.order_id} user_id={user_id} "
            f"variant={variant.value}"
        )
        if variant == OrderVariant.PLAN:
            message = f"Your {order.plan_type} meal order has been cancelled successfully."
        else:
            message = f"Your order #{order.order_id} has been cancelled."
        self._notify_safely(db, user_id, message, now)
        self._emit_order_event(ORDER_CANCELLED_EVENT, order)
        return order

    def _ensure_cancellable(self, order: MealOrder, now: datetime) -> None:
        if order.status == "delivered":
            raise OrderAlreadyFinalized("Delivered orders cannot be cancelled")
        if order.status == "cancelled":
            raise OrderAlreadyFinalized("Order is already cancelled")
        elapsed = as_naive_utc(now) - as_naive_utc(order.created_at)
        if elapsed > self.cancel_window:
            raise CancellationWindowExpired(
                details={
                    "window_seconds": int(self.cancel_window.total_seconds()),
                    "elapsed_seconds": int(elapsed.total_seconds()),
                }
            )

    def list_orders(
        self, db: Session, user_id: UUID, variant: OrderVariant, now: datetime
    ) -> List[MealOrder]:
        """A user's orders of one variant, newest first, statuses recomputed"""
        orders = OrderRepository(db).list_for_user(user_id, variant)
        return self.refresh_statuses(db, orders, now)

    def get_order(
        self,
        db: Session,
        user_id: UUID,
        order_id: UUID,
        variant: OrderVariant,
        now: datetime,
    ) -> MealOrder:
        """One of the user's orders with its status recomputed"""
        order = OrderRepository(db).get_by_id_and_variant(order_id, variant)
        if not order or order.user_id != user_id:
            raise NotFoundError(f"Order {order_id} not found")
        self.refresh_statuses(db, [order], now)
        return order

    def list_all_orders(self, db: Session, now: datetime) -> List[MealOrder]:
        """Every order, newest first, statuses recomputed (admin view)"""
        return self.refresh_statuses(db, OrderRepository(db).list_all(), now)

    def purge_order(self, db: Session, order_id: UUID) -> None:
        """Physically delete an order (admin only)"""
        if not OrderRepository(db).delete(order_id):
            raise NotFoundError(f"Order {order_id} not found")
        logger.info(f"order_purged order_id={order_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _notify_safely(self, db: Session, user_id: UUID, message: str, now: datetime) -> None:
        try:
            self.emitter.notify(db, user_id, message, now=now)
        except Exception as exc:
            logger.error(f"notification_failed user_id={user_id} error={exc}")

    def _emit_order_event(self, event: str, order: MealOrder) -> None:
        try:
            payload = OrderMapper.to_event(order)
            self.broadcaster.publish(event, payload)
            self.broadcaster.publish(event, payload, room=user_room(order.user_id))
        except Exception as exc:
            logger.warning(
                f"order_broadcast_failed event={event} order_id={order.order_id} error={exc}"
            )
