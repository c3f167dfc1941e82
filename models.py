from enum import Enum
from typing import List, Dict, Optional, Literal

from pydantic import BaseModel, Field


class Bank(str, Enum):
    AXIS_BANK = "Axis Bank"
    FEDERAL_BANK = "Federal Bank"
    HDFC_BANK = "HDFC Bank"
    ICICI_BANK = "ICICI Bank"
    IDFC_FIRST_BANK = "IDFC First Bank"
    INDUSIND_BANK = "IndusInd Bank"
    RBL_BANK = "RBL Bank"
    SBI_BANK = "SBI Bank"
    YES_BANK = "Yes Bank"
    KOTAK_MAHINDRA_BANK = "Kotak Mahindra Bank"
    BANK_OF_BARODA = "Bank of Baroda"


class CardType(str, Enum):
    PREMIUM = "premium"
    REGULAR = "regular"
    ENTRY = "entry"
    COBRAND = "cobrand"


class BenefitType(str, Enum):
    CASHBACK = "cashback"
    REWARD_POINTS = "reward_points"


# Display-label matching walks this list in order
CATEGORIES = [
    "Flipkart",
    "Amazon",
    "Swiggy",
    "Zomato",
    "Uber",
    "Ola",
    "BookMyShow",
    "BigBasket",
    "Travel",
    "Fuel",
    "Groceries",
    "Shopping",
    "Online Shopping",
    "Dining",
    "Entertainment",
    "Utilities",
    "General",
]

POPULAR_QUERIES = ["Amazon", "Flipkart", "Swiggy", "Travel", "Fuel", "Dining"]


class Benefit(BaseModel):
    category: str
    type: BenefitType = BenefitType.CASHBACK
    value: float = Field(0, ge=0)  # percentage
    description: Optional[str] = None
    conditions: Optional[str] = None


class FeeItem(BaseModel):
    value: float = 0
    type: Literal["fixed", "percentage"] = "fixed"
    description: Optional[str] = None


class FeesAndCharges(BaseModel):
    annual: FeeItem = Field(default_factory=FeeItem)
    joining: FeeItem = Field(default_factory=FeeItem)
    cashWithdrawal: FeeItem = Field(default_factory=FeeItem)
    forex: FeeItem = Field(default_factory=FeeItem)
    educationTransaction: Optional[FeeItem] = None
    walletLoad: Optional[FeeItem] = None
    utilityBillPayment: Optional[FeeItem] = None
    rentTransaction: Optional[FeeItem] = None
    fuelTransaction: Optional[FeeItem] = None
    other: Optional[FeeItem] = None


class LoungeItem(BaseModel):
    quantity: int = 0
    precondition: str = ""


class Lounge(BaseModel):
    domestic: Optional[LoungeItem] = None
    international: Optional[LoungeItem] = None


class Card(BaseModel):
    name: str = Field(..., min_length=1)
    bankName: Bank
    cardType: CardType = CardType.REGULAR
    description: Optional[str] = None
    link: str = "#"
    benefits: List[Benefit] = Field(default_factory=list)
    feesAndCharges: FeesAndCharges = Field(default_factory=FeesAndCharges)
    lounge: Optional[Lounge] = None


# ===== Ranking =====

RankingSource = Literal["ai", "heuristic"]


class RankedItem(BaseModel):
    name: str
    reason: Optional[str] = None


class RankedResult(BaseModel):
    results: List[RankedItem] = Field(default_factory=list)
    reasoning: Optional[str] = None
    source: RankingSource = "heuristic"


class ResultRow(BaseModel):
    name: str
    best_benefit: Optional[Benefit] = None
    best_benefit_label: str = "—"
    description: str = "—"
    reason: str = "—"


class ResolvedSearchResult(BaseModel):
    query: str
    cards: List[Card] = Field(default_factory=list)
    reasons: Dict[str, Optional[str]] = Field(default_factory=dict)
    reasoning: Optional[str] = None
    display_query: str = ""
    match_key: str = ""
    rows: List[ResultRow] = Field(default_factory=list)
    source: RankingSource = "heuristic"
    empty_message: Optional[str] = None


# ===== API =====

class SearchRequest(BaseModel):
    query: str = ""


class RankRequest(BaseModel):
    query: str
    cards: List[Card]


class RankResponse(BaseModel):
    rankedCardNames: List[str] = Field(default_factory=list)
    reasoning: Optional[str] = None


class CardCreatedResponse(BaseModel):
    id: str
    name: str
