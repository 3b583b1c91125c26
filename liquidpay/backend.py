"""Async client for the LiquidPay backend functions.

The backend owns order creation against the payment vendor, payment
persistence and reward bookkeeping. This module only shapes requests and
turns every failure into a ``BackendError`` the UI can show.
"""

from typing import Dict, Optional

import httpx

from liquidpay import config
from liquidpay.auth import AuthSession
from liquidpay.models import Order, PaymentRecord


class BackendError(Exception):
    def __init__(self, description: str, status_code: Optional[int] = None):
        super().__init__(description)
        self.description = description
        self.status_code = status_code


class BackendClient:
    def __init__(
        self,
        session: AuthSession,
        base_url: str = config.BACKEND_URL,
        timeout: float = config.BACKEND_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def _post(self, path: str, payload: dict) -> dict:
        try:
            response = await self._client.post(path, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise BackendError(str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("error") if isinstance(body, dict) else None
            detail = detail or response.text
            raise BackendError(detail or f"HTTP {response.status_code}", response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError("Malformed response from backend", response.status_code) from exc

    async def create_order(self, amount_paise: int, bill_id: str, notes: Dict[str, str]) -> Order:
        data = await self._post(
            "/createOrder",
            {"amountPaise": amount_paise, "billId": bill_id, "notes": notes},
        )
        try:
            return Order.model_validate(data)
        except ValueError as exc:
            raise BackendError(f"Unexpected order payload: {exc}") from exc

    async def record_payment(self, record: PaymentRecord) -> None:
        await self._post("/recordPayment", record.model_dump(mode="json", by_alias=True))

    async def set_pending_context_reward_if_absent(
        self, uid: str, payment_id: str, title: str, reason: str, coins: int
    ) -> None:
        await self._post(
            "/rewards/pending",
            {
                "uid": uid,
                "paymentId": payment_id,
                "title": title,
                "reason": reason,
                "coins": coins,
            },
        )
