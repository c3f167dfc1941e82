"""
Starter card catalog

Indicative values collected from issuer pages (updated 2025-09-06).
Verify fees and benefits against the official pages before relying on them.
"""

from typing import List

from models import Card


def _pct(value, description=None):
    return {"value": value, "type": "percentage", "description": description}


def _fixed(value, description=None):
    return {"value": value, "type": "fixed", "description": description}


SEED_CARDS = [
    {
        "name": "Axis My Zone Credit Card",
        "bankName": "Axis Bank",
        "cardType": "regular",
        "feesAndCharges": {
            "annual": _fixed(500),
            "joining": _fixed(500),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500) of the cash amount"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver for eligible transactions"),
        },
        "description": "Lifestyle card with Swiggy/movie offers and surcharge waivers",
        "benefits": [
            {"category": "Swiggy", "type": "cashback", "value": 15, "description": "Swiggy discount; caps/partners apply"},
            {"category": "Entertainment", "type": "cashback", "value": 10, "description": "Movie/entertainment offers"},
            {"category": "Shopping", "type": "cashback", "value": 1.5, "description": "Cashback on other spends"},
        ],
        "link": "https://www.axisbank.com/retail/cards/credit-card/my-zone-credit-card",
    },
    {
        "name": "Flipkart Axis Bank Credit Card",
        "bankName": "Axis Bank",
        "cardType": "cobrand",
        "feesAndCharges": {
            "annual": _fixed(500),
            "joining": _fixed(500),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Best for Flipkart shopping and partner merchants",
        "benefits": [
            {"category": "Flipkart", "type": "cashback", "value": 5, "description": "5% cashback on Flipkart"},
            {"category": "Uber", "type": "cashback", "value": 4, "description": "4% cashback on select partners"},
            {"category": "BookMyShow", "type": "cashback", "value": 4, "description": "4% cashback on entertainment partners"},
            {"category": "General", "type": "cashback", "value": 1.5, "description": "1.5% cashback on other spends"},
        ],
        "link": "https://www.axisbank.com/retail/cards/credit-card/flipkart-axisbank-credit-card",
    },
    {
        "name": "Federal Bank Visa Celesta Credit Card",
        "bankName": "Federal Bank",
        "cardType": "premium",
        "feesAndCharges": {
            "annual": _fixed(3500),
            "joining": _fixed(3500),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(2),
            "fuelTransaction": _pct(1, "1% surcharge waiver"),
        },
        "description": "Premium lifestyle and travel card with privileges",
        "benefits": [
            {"category": "Travel", "type": "reward_points", "value": 4},
            {"category": "Dining", "type": "reward_points", "value": 4},
            {"category": "General", "type": "reward_points", "value": 1},
        ],
        "link": "https://www.federalbank.co.in/visa-celesta-credit-card",
        "lounge": {
            "domestic": {"quantity": 8, "precondition": "Per year, on eligible spends"},
            "international": {"quantity": 2, "precondition": "Per year via Priority Pass"},
        },
    },
    {
        "name": "HDFC Millennia Credit Card",
        "bankName": "HDFC Bank",
        "cardType": "regular",
        "feesAndCharges": {
            "annual": _fixed(1000),
            "joining": _fixed(1000),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Cashback on popular online merchants and everyday spends",
        "benefits": [
            {"category": "Online Shopping", "type": "cashback", "value": 5, "description": "Accelerated cashback on select online spends"},
            {"category": "Amazon", "type": "cashback", "value": 2.5},
            {"category": "Flipkart", "type": "cashback", "value": 2.5},
            {"category": "General", "type": "cashback", "value": 1},
        ],
        "link": "https://www.hdfcbank.com/personal/pay/cards/millennia-cards/millennia-cc-new",
        "lounge": {
            "domestic": {"quantity": 8, "precondition": "On quarterly spends of ₹1 lakh"},
        },
    },
    {
        "name": "Swiggy HDFC Bank Credit Card",
        "bankName": "HDFC Bank",
        "cardType": "cobrand",
        "feesAndCharges": {
            "annual": _fixed(500),
            "joining": _fixed(500),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Designed for Swiggy, dining, and popular online spends",
        "benefits": [
            {"category": "Swiggy", "type": "cashback", "value": 10, "description": "10% back on Swiggy ecosystem"},
            {"category": "Amazon", "type": "cashback", "value": 5},
            {"category": "Zomato", "type": "cashback", "value": 5},
            {"category": "General", "type": "cashback", "value": 1},
        ],
        "link": "https://www.hdfcbank.com/personal/pay/cards/credit-cards/swiggy-hdfc-bank-credit-card",
    },
    {
        "name": "Tata Neu Infinity HDFC Bank Credit Card",
        "bankName": "HDFC Bank",
        "cardType": "cobrand",
        "feesAndCharges": {
            "annual": _fixed(1499),
            "joining": _fixed(1499),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(2),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "NeuCoins on Tata Neu and partner brands",
        "benefits": [
            {"category": "Shopping", "type": "cashback", "value": 5, "description": "On Tata Neu ecosystem"},
            {"category": "Groceries", "type": "cashback", "value": 5},
            {"category": "General", "type": "cashback", "value": 1.5},
        ],
        "link": "https://www.hdfcbank.com/personal/pay/cards/credit-cards/tata-neu-infinity-hdfc-bank-credit-card",
    },
    {
        "name": "Amazon Pay ICICI Credit Card",
        "bankName": "ICICI Bank",
        "cardType": "cobrand",
        "feesAndCharges": {
            "annual": _fixed(0, "Lifetime free"),
            "joining": _fixed(0),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹300)"),
            "forex": _pct(1.99),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Best for Amazon shopping with Prime/non-Prime benefits",
        "benefits": [
            {"category": "Amazon", "type": "cashback", "value": 5, "description": "For Prime members on Amazon"},
            {"category": "Amazon", "type": "cashback", "value": 3, "description": "For non-Prime members on Amazon"},
            {"category": "General", "type": "cashback", "value": 1, "description": "All other payments"},
        ],
        "link": "https://www.icicibank.com/personal-banking/cards/credit-card/amazon-pay-credit-card/benefits-features",
    },
    {
        "name": "ICICI Bank Sapphiro Credit Card",
        "bankName": "ICICI Bank",
        "cardType": "regular",
        "feesAndCharges": {
            "annual": _fixed(3500),
            "joining": _fixed(6500),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹300)"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Premium travel and lifestyle card with airport lounge access",
        "benefits": [
            {"category": "Travel", "type": "reward_points", "value": 4},
            {"category": "Dining", "type": "reward_points", "value": 4},
            {"category": "General", "type": "reward_points", "value": 1},
        ],
        "link": "https://www.icicibank.com/personal-banking/cards/credit-card/sapphiro-credit-card",
        "lounge": {
            "domestic": {"quantity": 16, "precondition": "4 per quarter"},
            "international": {"quantity": 2, "precondition": "Per year via DreamFolks"},
        },
    },
    {
        "name": "IDFC FIRST Wealth Credit Card",
        "bankName": "IDFC First Bank",
        "cardType": "premium",
        "feesAndCharges": {
            "annual": _fixed(0, "Lifetime free"),
            "joining": _fixed(0),
            "cashWithdrawal": _pct(0, "No cash advance fee (confirm)"),
            "forex": _pct(0, "0% forex markup (confirm)"),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Premium LTF card with travel/dining privileges and low fees",
        "benefits": [
            {"category": "Dining", "type": "reward_points", "value": 3},
            {"category": "Travel", "type": "reward_points", "value": 3},
            {"category": "General", "type": "reward_points", "value": 1},
        ],
        "link": "https://www.idfcfirstbank.com/credit-card/wealth",
    },
    {
        "name": "SBI SimplyCLICK Credit Card",
        "bankName": "SBI Bank",
        "cardType": "entry",
        "feesAndCharges": {
            "annual": _fixed(499, "Waived on annual spends of ₹1 lakh"),
            "joining": _fixed(499),
            "cashWithdrawal": _pct(2.5, "2.5% (Min. ₹500)"),
            "forex": _pct(3.5),
            "fuelTransaction": _pct(1, "1% surcharge waiver (caps apply)"),
        },
        "description": "Online shopping card with accelerated rewards on partner sites",
        "benefits": [
            {"category": "Online Shopping", "type": "reward_points", "value": 2.5, "description": "10X rewards on partner merchants"},
            {"category": "BookMyShow", "type": "reward_points", "value": 2.5},
            {"category": "General", "type": "reward_points", "value": 0.25},
        ],
        "link": "https://www.sbicard.com/en/personal/credit-cards/shopping/simplyclick-sbi-card.page",
    },
]


def load_seed_cards() -> List[Card]:
    return [Card.model_validate(card) for card in SEED_CARDS]
