"""Checkout controller.

Flow:
    1. start_payment → backend creates an order → checkout sheet opens
    2a. on_payment_error → failure message, failed record in background
    2b. on_payment_success → success view after a short delay, then
        record, context mission and local notification as independent jobs
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict

from liquidpay import config
from liquidpay.auth import AuthSession
from liquidpay.backend import BackendClient, BackendError
from liquidpay.checkout import CheckoutDelegate, CheckoutOptions, CheckoutSDK
from liquidpay.models import Payment, PaymentRecord, PaymentStatus
from liquidpay.notifications import NotificationService
from liquidpay.rewards import ContextRewardsEngine, coins_preview
from liquidpay.tasks import TaskRunner
from liquidpay.ui import UIQueue, ui_bound

logger = structlog.get_logger(__name__)

Listener = Callable[[str, Any], None]


class CheckoutState(BaseModel):
    last_result_message: Optional[str] = None
    show_success_screen: bool = False
    success_payment: Optional[Payment] = None
    success_payee_name: Optional[str] = None
    success_coins_earned: int = 0


class CheckoutAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_paise: int
    bill_id: str
    order_id: str
    key_id: str
    payee_name: Optional[str]
    first_attempt_at: datetime


class PaymentController(CheckoutDelegate):
    def __init__(
        self,
        auth: AuthSession,
        backend: BackendClient,
        checkout: CheckoutSDK,
        presenter: Callable[[], Any],
        notifications: Optional[NotificationService] = None,
        rewards=ContextRewardsEngine,
        ui: Optional[UIQueue] = None,
        runner: Optional[TaskRunner] = None,
        success_delay: float = config.SUCCESS_SCREEN_DELAY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.auth = auth
        self.backend = backend
        self.checkout = checkout
        self.presenter = presenter
        self.notifications = notifications or NotificationService()
        self.rewards = rewards
        self.ui = ui or UIQueue()
        self.runner = runner or TaskRunner()
        self.success_delay = success_delay
        self.clock = clock

        self.state = CheckoutState()
        self.attempt: Optional[CheckoutAttempt] = None
        self._listeners: List[Listener] = []

    # --- observable state -------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @ui_bound
    def _publish(self, **changes: Any) -> None:
        for field, value in changes.items():
            setattr(self.state, field, value)
            for listener in self._listeners:
                try:
                    listener(field, value)
                except Exception:
                    logger.exception("State listener failed", field=field)

    @ui_bound
    def dismiss_success_screen(self) -> None:
        self._publish(
            show_success_screen=False,
            success_payment=None,
            success_payee_name=None,
            success_coins_earned=0,
        )

    # --- checkout ---------------------------------------------------------

    @ui_bound
    async def start_payment(
        self,
        amount_paise: int,
        bill_id: str,
        notes: Optional[Dict[str, str]] = None,
        payee_name: Optional[str] = None,
    ) -> None:
        user = self.auth.current_user
        if user is None:
            self._publish(last_result_message="User not authenticated")
            return

        # uid must always travel with the order so the backend webhook can attribute it
        order_notes = dict(notes or {})
        order_notes["uid"] = user.uid
        if payee_name is not None:
            order_notes["recipient"] = payee_name

        try:
            order = await self.backend.create_order(amount_paise, bill_id, order_notes)
        except BackendError as exc:
            self._publish(last_result_message=f"Failed to create order: {exc.description}")
            return

        surface = self.presenter()
        if surface is None:
            self._publish(last_result_message="Unable to present checkout")
            return

        options = CheckoutOptions(
            amount=order.amount,
            currency=order.currency,
            order_id=order.order_id,
            notes={"billId": bill_id, **(notes or {})},
            contact=user.phone_number or "",
        )

        self.attempt = CheckoutAttempt(
            amount_paise=amount_paise,
            bill_id=bill_id,
            order_id=order.order_id,
            key_id=order.key_id,
            payee_name=payee_name,
            first_attempt_at=self.clock(),
        )
        logger.info("Opening checkout", order_id=order.order_id, bill_id=bill_id)
        self.checkout.open(order.key_id, options.to_options(), surface, self)

    # --- CheckoutDelegate (any thread) -------------------------------------

    def on_payment_error(self, code: int, message: str, data: Optional[Dict[str, Any]] = None):
        logger.info("Payment failed callback", code=code, message=message)
        return self.ui.submit(self._handle_failure(message))

    def on_payment_success(self, payment_id: str, data: Optional[Dict[str, Any]] = None):
        logger.info("Payment success callback", payment_id=payment_id)
        return self.ui.submit(self._handle_success(payment_id))

    # --- outcome handling (UI loop) -----------------------------------------

    @ui_bound
    async def _handle_failure(self, message: str) -> None:
        self._publish(last_result_message=f"Payment failed: {message}")

        attempt = self.attempt
        if attempt is None:
            logger.warning("Failure callback without a checkout in flight")
            return
        self.runner.submit("record-failed", self._record(attempt, PaymentStatus.FAILED, None))

    @ui_bound
    async def _handle_success(self, payment_id: str) -> None:
        self._publish(last_result_message=f"Payment success: {payment_id}")

        attempt = self.attempt
        if attempt is None:
            logger.warning("Success callback without a checkout in flight", payment_id=payment_id)
            return

        now = self.clock()
        coins = coins_preview(attempt.amount_paise, now.date())
        user = self.auth.current_user
        payment = Payment(
            id=payment_id,
            user_id=user.uid if user else "",
            bill_id=attempt.bill_id,
            amount_paise=attempt.amount_paise,
            status=PaymentStatus.SUCCESS,
            vendor_payment_id=payment_id,
            order_id=attempt.order_id,
            recipient=attempt.payee_name,
            created_at=now,
        )
        self._publish(
            success_payment=payment,
            success_payee_name=attempt.payee_name,
            success_coins_earned=coins,
        )

        await asyncio.sleep(self.success_delay)
        self._publish(show_success_screen=True)
        logger.info("Success screen shown", payment_id=payment_id, coins=coins)

        self.runner.submit("record-success", self._record(attempt, PaymentStatus.SUCCESS, payment_id))
        self.runner.submit("context-mission", self._evaluate_context_mission(attempt, payment_id))
        self.runner.submit("success-notification", self._notify(attempt.amount_paise, coins))

    # --- background jobs ---------------------------------------------------

    async def _record(self, attempt: CheckoutAttempt, status: PaymentStatus, payment_id: Optional[str]) -> None:
        user = self.auth.current_user
        if user is None:
            return
        await self.backend.record_payment(
            PaymentRecord(
                user_id=user.uid,
                bill_id=attempt.bill_id,
                amount_paise=attempt.amount_paise,
                status=status,
                vendor_payment_id=payment_id,
                order_id=attempt.order_id,
                recipient=attempt.payee_name,
                first_attempt_at=attempt.first_attempt_at,
            )
        )
        logger.info("Payment recorded", status=status.value, order_id=attempt.order_id)

    async def _evaluate_context_mission(self, attempt: CheckoutAttempt, payment_id: str) -> None:
        offer = self.rewards.evaluate(
            amount_paise=attempt.amount_paise,
            recipient=attempt.payee_name,
            pci=None,
            streak_days=None,
        )
        if offer is None:
            logger.info("No context mission matched", payment_id=payment_id)
            return

        user = self.auth.current_user
        if user is None:
            logger.error("Context mission matched without an authenticated user", payment_id=payment_id)
            return

        await self.backend.set_pending_context_reward_if_absent(
            uid=user.uid,
            payment_id=payment_id,
            title=offer.title,
            reason=offer.reason,
            coins=max(1, offer.coins),
        )
        logger.info("Context mission reward pending", payment_id=payment_id, title=offer.title)

    async def _notify(self, amount_paise: int, coins: int) -> None:
        self.notifications.send_payment_success_notification(amount=amount_paise, coins_earned=coins)
