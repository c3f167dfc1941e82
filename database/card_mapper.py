"""
Card document mapper

Converts between stored MongoDB documents and Card models. Stored documents
are written by forms and seed scripts over time, so reading is lenient:
unknown enum values fall back to defaults, numbers are coerced, missing fee
items become zero-valued fixed fees.
"""

import math
import re
from typing import Any, Dict, Optional

from models import (
    Bank,
    Benefit,
    BenefitType,
    Card,
    CardType,
    FeeItem,
    FeesAndCharges,
    Lounge,
    LoungeItem,
)

REQUIRED_FEES = ("annual", "joining", "cashWithdrawal", "forex")
OPTIONAL_FEES = (
    "educationTransaction",
    "walletLoad",
    "utilityBillPayment",
    "rentTransaction",
    "fuelTransaction",
    "other",
)


def slugify(name: str) -> str:
    """
    Document id derived from a card name

    >>> slugify("Amazon Pay ICICI Bank Credit Card")
    'amazon-pay-icici-bank-credit-card'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower().strip()).strip("-")
    return slug or "card"


def _num(value: Any, fallback: float = 0) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def to_benefit_type(value: Any) -> BenefitType:
    return BenefitType.REWARD_POINTS if value == BenefitType.REWARD_POINTS.value else BenefitType.CASHBACK


def to_card_type(value: Any) -> CardType:
    try:
        return CardType(value)
    except ValueError:
        return CardType.REGULAR


def to_bank(value: Any) -> Bank:
    try:
        return Bank(str(value or ""))
    except ValueError:
        return Bank.AXIS_BANK


def to_fee_item(item: Any, fallback_value: float = 0) -> FeeItem:
    if not isinstance(item, dict):
        return FeeItem(value=fallback_value)
    return FeeItem(
        value=_num(item.get("value"), fallback_value),
        type="percentage" if item.get("type") == "percentage" else "fixed",
        description=_str(item.get("description")),
    )


def to_fees_and_charges(raw: Any) -> FeesAndCharges:
    raw = raw if isinstance(raw, dict) else {}
    fees = {name: to_fee_item(raw.get(name)) for name in REQUIRED_FEES}
    for name in OPTIONAL_FEES:
        if raw.get(name):
            fees[name] = to_fee_item(raw[name])
    return FeesAndCharges(**fees)


def _to_lounge_item(raw: Any) -> Optional[LoungeItem]:
    if not isinstance(raw, dict):
        return None
    return LoungeItem(
        quantity=int(_num(raw.get("quantity"))),
        precondition=str(raw.get("precondition") or ""),
    )


def to_lounge(raw: Any) -> Optional[Lounge]:
    if not isinstance(raw, dict):
        return None
    return Lounge(
        domestic=_to_lounge_item(raw.get("domestic")),
        international=_to_lounge_item(raw.get("international")),
    )


def document_to_card(doc: Dict[str, Any]) -> Card:
    """
    Stored document → Card

    Args:
        doc: Raw MongoDB document

    Returns:
        Normalized Card
    """
    raw_benefits = doc.get("benefits")
    benefits = []
    if isinstance(raw_benefits, list):
        for b in raw_benefits:
            if not isinstance(b, dict):
                continue
            benefits.append(Benefit(
                category=str(b.get("category") or ""),
                type=to_benefit_type(b.get("type")),
                value=max(_num(b.get("value")), 0),
                description=_str(b.get("description")),
                conditions=_str(b.get("conditions")),
            ))

    return Card(
        name=str(doc.get("name") or doc.get("_id") or "card"),
        bankName=to_bank(doc.get("bankName")),
        cardType=to_card_type(doc.get("cardType")),
        description=_str(doc.get("description")),
        link=str(doc.get("link") or "#"),
        benefits=benefits,
        feesAndCharges=to_fees_and_charges(doc.get("feesAndCharges")),
        lounge=to_lounge(doc.get("lounge")),
    )


def card_to_document(card: Card) -> Dict[str, Any]:
    """
    Card → fields to $set on the stored document

    Optional fields are written as explicit nulls so an edit that clears a
    field also clears it in the database.
    """
    fees = card.feesAndCharges
    return {
        "name": card.name,
        "bankName": card.bankName.value,
        "cardType": card.cardType.value,
        "description": card.description,
        "benefits": [b.model_dump(mode="json") for b in card.benefits],
        "feesAndCharges": {
            name: (getattr(fees, name).model_dump(mode="json") if getattr(fees, name) else None)
            for name in REQUIRED_FEES + OPTIONAL_FEES
        },
        "link": card.link,
        "lounge": card.lounge.model_dump(mode="json") if card.lounge else None,
    }
