"""Result data model for contract amortization.

This module contains data classes that hold the calculated schedule
for a contract, organized by timeline year. Each renderer extracts the
fields it needs from this structure.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from model.ContractTerms import ContractTerms


@dataclass(frozen=True)
class YearlyRecord:
    """All schedule data for a single timeline year.

    Years are 1-based. Years 1..terms.years make up the earning period,
    later years only carry deferred payouts.
    """
    year: int
    label: str
    is_earning_year: bool

    # Earned (earning period only)
    cash_salary: float = 0.0
    deferred_earned: float = 0.0
    recognized_value: float = 0.0

    # Received
    deferred_payout: float = 0.0
    cash_received: float = 0.0
    cumulative_received: float = 0.0


@dataclass(frozen=True)
class InstallmentDetail:
    """One discounted installment: the slice of a year's deferral paid in a later year."""
    earning_year: int
    payout_year: int
    delay: int
    nominal_amount: float
    discount_factor: float
    present_value: float


@dataclass(frozen=True)
class CalculationResult:
    """Complete amortization of a contract.

    Contains the summary metrics plus one YearlyRecord per timeline year.
    """
    terms: ContractTerms
    nominal_aav: float
    tax_aav: float
    total_recognized_pv: float
    total_deferred_pv: float
    effective_discount: float
    yearly_breakdown: Tuple[YearlyRecord, ...] = ()
    recognition: str = 'earned'

    def get_year(self, year: int) -> Optional[YearlyRecord]:
        """Get the record for a timeline year, or None if out of range."""
        if 1 <= year <= len(self.yearly_breakdown):
            return self.yearly_breakdown[year - 1]
        return None

    def earning_years(self) -> Tuple[YearlyRecord, ...]:
        """Records for the earning period only."""
        return tuple(r for r in self.yearly_breakdown if r.is_earning_year)

    def payout_years(self) -> Tuple[YearlyRecord, ...]:
        """Records in which a deferred installment is paid."""
        return tuple(r for r in self.yearly_breakdown if r.deferred_payout > 0)

    @property
    def total_cash_received(self) -> float:
        """Total cash paid out over the whole timeline."""
        if not self.yearly_breakdown:
            return 0.0
        return self.yearly_breakdown[-1].cumulative_received

    def to_dict(self) -> dict:
        """Plain dictionary form with camelCase terms, for JSON output."""
        return {
            "terms": self.terms.to_spec(),
            "recognition": self.recognition,
            "nominal_aav": self.nominal_aav,
            "tax_aav": self.tax_aav,
            "total_recognized_pv": self.total_recognized_pv,
            "total_deferred_pv": self.total_deferred_pv,
            "effective_discount": self.effective_discount,
            "yearly_breakdown": [asdict(r) for r in self.yearly_breakdown],
        }
