"""
POS Service — Order lifecycle planner (pure, no database)

The order state machine over (status_payment, status_kitchen, table) is
expressed as functions that return the side effects a transition needs:

    RequireTableAvailable  → table must be free before it is assigned
    SetTableAvailability   → flip a table's free/occupied flag
    AdjustStock            → signed stock delta for one product

db/order_ops.py applies the returned effects, in order, inside one
transaction. Nothing here touches the session, so every transition rule is
unit-testable on plain values.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from pos_service.core.errors import NotFoundError, ValidationError
from pos_service.models.enums import KitchenStatus, PaymentStatus

CENT = Decimal("0.01")


# ─── Effects ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RequireTableAvailable:
    table_id: int


@dataclass(frozen=True)
class SetTableAvailability:
    table_id: int
    available: bool


@dataclass(frozen=True)
class AdjustStock:
    product_id: int
    delta: int


Effect = Union[RequireTableAvailable, SetTableAvailability, AdjustStock]


# ─── Values ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OrderState:
    table_id: int
    status_payment: PaymentStatus = PaymentStatus.IN_PROCESS
    status_kitchen: KitchenStatus = KitchenStatus.IN_THE_KITCHEN
    payment_method_id: int | None = None


@dataclass(frozen=True)
class OrderChange:
    """Fields an update request may carry. None means "leave as is"."""
    table_id: int
    status_payment: PaymentStatus | None = None
    status_kitchen: KitchenStatus | None = None
    payment_method_id: int | None = None


@dataclass(frozen=True)
class ItemLine:
    """An order item as currently persisted."""
    id: int
    product_id: int
    quantity: int


@dataclass(frozen=True)
class SubmittedItem:
    """An order item as submitted by the caller; id=None means a new line."""
    product_id: int
    quantity: int
    id: int | None = None


@dataclass
class Plan:
    before_persist: list[Effect] = field(default_factory=list)
    after_persist: list[Effect] = field(default_factory=list)


@dataclass
class UpdatePlan(Plan):
    state: OrderState | None = None
    items_locked: bool = False


@dataclass
class ItemDiff:
    creates: list[SubmittedItem] = field(default_factory=list)
    updates: list[tuple[ItemLine, SubmittedItem]] = field(default_factory=list)
    deletes: list[ItemLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)

    def stock_effects(self) -> list[AdjustStock]:
        """Stock deltas in application order: creates, updates, then deletes."""
        effects: list[AdjustStock] = []
        for item in self.creates:
            effects.append(AdjustStock(item.product_id, -item.quantity))
        for old, new in self.updates:
            effects.extend(item_update_effects(old, new))
        for item in self.deletes:
            effects.append(AdjustStock(item.product_id, item.quantity))
        return effects


# ─── Rules ────────────────────────────────────────────────────────────────────

ALLOWED_PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.IN_PROCESS: {PaymentStatus.COMPLETED, PaymentStatus.CANCELLED},
    PaymentStatus.COMPLETED: set(),
    PaymentStatus.CANCELLED: set(),
}


def validate_payment_transition(old: PaymentStatus, new: PaymentStatus) -> None:
    if old == new:
        return
    if new not in ALLOWED_PAYMENT_TRANSITIONS[old]:
        raise ValidationError(
            f"payment status cannot change from '{old.value}' to '{new.value}'"
        )


def item_update_effects(old: ItemLine, new: SubmittedItem) -> list[AdjustStock]:
    if old.product_id != new.product_id:
        # Line switched product: give back the old one, consume the new one.
        return [
            AdjustStock(old.product_id, old.quantity),
            AdjustStock(new.product_id, -new.quantity),
        ]
    difference = new.quantity - old.quantity
    if difference == 0:
        return []
    return [AdjustStock(new.product_id, -difference)]


def plan_create(table_id: int) -> Plan:
    """Table is checked before the order row exists and occupied only once
    every item (and its stock decrement) has been persisted."""
    return Plan(
        before_persist=[RequireTableAvailable(table_id)],
        after_persist=[SetTableAvailability(table_id, False)],
    )


def plan_update(
    previous: OrderState,
    change: OrderChange,
    persisted_items: Iterable[ItemLine],
) -> UpdatePlan:
    paying = change.payment_method_id is not None

    status_payment = change.status_payment or previous.status_payment
    status_kitchen = change.status_kitchen or previous.status_kitchen
    payment_method_id = change.payment_method_id if paying else previous.payment_method_id
    if paying:
        status_payment = PaymentStatus.COMPLETED
        status_kitchen = KitchenStatus.READY_TO_SERVE

    validate_payment_transition(previous.status_payment, status_payment)

    was_open = previous.status_payment == PaymentStatus.IN_PROCESS
    plan = UpdatePlan()

    # Table moves only for an open tab that is not being paid in this update;
    # otherwise the order keeps the table it actually occupies.
    table_id = previous.table_id
    if was_open and not paying and change.table_id != previous.table_id:
        table_id = change.table_id
        plan.before_persist += [
            RequireTableAvailable(table_id),
            SetTableAvailability(previous.table_id, True),
            SetTableAvailability(table_id, False),
        ]

    cancelling = status_payment == PaymentStatus.CANCELLED
    if cancelling and previous.status_payment != PaymentStatus.CANCELLED:
        plan.before_persist += [
            AdjustStock(item.product_id, item.quantity) for item in persisted_items
        ]

    if was_open and status_payment != PaymentStatus.IN_PROCESS:
        plan.after_persist.append(SetTableAvailability(table_id, True))

    plan.state = OrderState(
        table_id=table_id,
        status_payment=status_payment,
        status_kitchen=status_kitchen,
        payment_method_id=payment_method_id,
    )
    plan.items_locked = not was_open or cancelling
    return plan


def plan_delete(state: OrderState, persisted_items: Iterable[ItemLine]) -> list[Effect]:
    effects: list[Effect] = [
        AdjustStock(item.product_id, item.quantity) for item in persisted_items
    ]
    if state.status_payment == PaymentStatus.IN_PROCESS:
        effects.append(SetTableAvailability(state.table_id, True))
    return effects


def diff_items(persisted: Iterable[ItemLine], submitted: Iterable[SubmittedItem]) -> ItemDiff:
    """
    Split a submitted item set into creates / updates / deletes against what is
    persisted. Any persisted item whose id is not submitted is deleted.
    """
    by_id = {item.id: item for item in persisted}
    diff = ItemDiff()
    seen: set[int] = set()

    for item in submitted:
        if item.quantity <= 0:
            raise ValidationError("quantity must be greater than 0")
        if item.id is None:
            diff.creates.append(item)
            continue
        if item.id not in by_id:
            raise NotFoundError(f"order item {item.id} does not belong to this order")
        if item.id in seen:
            raise ValidationError(f"order item {item.id} submitted more than once")
        seen.add(item.id)
        old = by_id[item.id]
        if old.product_id != item.product_id or old.quantity != item.quantity:
            diff.updates.append((old, item))

    diff.deletes = [item for item_id, item in by_id.items() if item_id not in seen]
    return diff


def line_subtotal(price: Decimal, quantity: int) -> Decimal:
    return (Decimal(price) * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def order_total(subtotals: Iterable[Decimal], tax: Decimal) -> Decimal:
    subtotal = sum((Decimal(s) for s in subtotals), Decimal("0"))
    total = subtotal + subtotal * Decimal(tax) / Decimal(100)
    return total.quantize(CENT, rounding=ROUND_HALF_UP)
