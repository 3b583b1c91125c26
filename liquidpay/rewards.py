"""Client-side reward previews.

The backend awards coins (with tier and weekend multipliers). What lives
here only drives the success screen and the context missions shown to the
user; the backend remains the source of truth.
"""

from datetime import date
from typing import Optional

from liquidpay.models import RewardOffer

SATURDAY = 5
SUNDAY = 6
WEEKEND_MULTIPLIER = 2


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def coins_preview(amount_paise: int, day: date) -> int:
    """1 coin per paise, doubled on Saturdays and Sundays."""
    return amount_paise * (WEEKEND_MULTIPLIER if is_weekend(day) else 1)


class ContextRewardsEngine:
    """Matches a payment against the context missions on offer.

    Missions are checked in order and the first match wins.
    """

    # (keywords in recipient name, title, reason, coins)
    RECIPIENT_MISSIONS = [
        (("chai", "tea", "coffee", "cafe"), "Chai Break", "Paid at a tea or coffee stall", 25),
        (("kirana", "grocery", "mart", "store"), "Local Hero", "Supported a neighbourhood store", 40),
        (("pharmacy", "medical", "chemist"), "Stay Well", "Paid at a pharmacy", 30),
    ]

    BIG_TICKET_PAISE = 50_000
    BIG_TICKET_COINS = 50

    @classmethod
    def evaluate(
        cls,
        amount_paise: int,
        recipient: Optional[str],
        pci: Optional[float] = None,
        streak_days: Optional[int] = None,
    ) -> Optional[RewardOffer]:
        # pci and streak_days are reserved for upcoming missions
        if amount_paise <= 0:
            return None

        name = (recipient or "").lower()
        for keywords, title, reason, coins in cls.RECIPIENT_MISSIONS:
            if any(keyword in name for keyword in keywords):
                return RewardOffer(title=title, reason=reason, coins=coins)

        if amount_paise >= cls.BIG_TICKET_PAISE:
            return RewardOffer(
                title="Big Spender",
                reason=f"Paid ₹{amount_paise / 100:.2f} in one go",
                coins=cls.BIG_TICKET_COINS,
            )
        return None
