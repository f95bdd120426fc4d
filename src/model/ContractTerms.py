"""Contract terms for a deferred-compensation contract.

ContractTerms is the immutable input to the amortization calculator.
Program specs store the same fields as camelCase JSON keys; from_spec()
and to_spec() convert between the two.
"""

import math
from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Dict


# Maps dataclass field names to their camelCase spec.json keys
SPEC_KEYS: Dict[str, str] = {
    'total_value': 'totalValue',
    'years': 'years',
    'deferral_amount': 'deferralAmount',
    'deferral_start_year': 'deferralStartYear',
    'payout_duration': 'payoutDuration',
    'interest_rate': 'interestRate',
}


class InvalidTermsError(ValueError):
    """Raised when contract terms violate a precondition of the calculator.

    Attributes:
        field: The spec.json key of the offending field
        message: Human readable description of the violated constraint
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


@dataclass(frozen=True)
class ContractTerms:
    """Terms of a contract with a deferred portion.

    All money amounts are nominal dollars. interest_rate is a human
    percentage: 4.43 means 4.43%.
    """
    total_value: float
    years: int
    deferral_amount: float
    deferral_start_year: int
    payout_duration: int
    interest_rate: float

    @classmethod
    def from_spec(cls, spec: dict) -> 'ContractTerms':
        """Build terms from a spec dictionary using camelCase keys.

        Args:
            spec: Mapping containing all six contract keys

        Returns:
            A new ContractTerms instance (not yet validated)

        Raises:
            InvalidTermsError: If the spec is not a mapping, or a key is
                missing or not numeric
        """
        if not isinstance(spec, dict):
            raise InvalidTermsError('spec', f"must be a JSON object, got {type(spec).__name__}")
        values = {}
        for name, key in SPEC_KEYS.items():
            if key not in spec or spec[key] is None:
                raise InvalidTermsError(key, "is required")
            value = spec[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTermsError(key, f"must be a number, got {value!r}")
            values[name] = value
        return cls(**values)

    def to_spec(self) -> dict:
        """Convert back to a camelCase spec dictionary."""
        return {SPEC_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    def replace(self, **changes) -> 'ContractTerms':
        """Return a copy with the given fields changed."""
        return dataclass_replace(self, **changes)

    @property
    def deferral_fraction(self) -> float:
        """Share of the total value that is deferred (0 for an empty contract)."""
        if self.total_value == 0:
            return 0.0
        return self.deferral_amount / self.total_value

    @property
    def payout_start_year(self) -> int:
        """Timeline year of the first deferred installment."""
        return int(self.years + self.deferral_start_year)

    @property
    def payout_end_year(self) -> int:
        """Timeline year of the last deferred installment."""
        return self.payout_start_year + int(self.payout_duration) - 1

    @property
    def timeline_length(self) -> int:
        """Number of years covered by the earning period plus the payout tail."""
        return int(max(self.years, self.years + self.deferral_start_year + self.payout_duration))

    def validate(self) -> None:
        """Check the terms against the calculator's preconditions.

        Raises:
            InvalidTermsError: On the first violated constraint
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise InvalidTermsError(SPEC_KEYS[f.name], "must be a finite number")

        for name in ('years', 'deferral_start_year', 'payout_duration'):
            if getattr(self, name) != int(getattr(self, name)):
                raise InvalidTermsError(SPEC_KEYS[name], "must be a whole number of years")

        if self.years < 1:
            raise InvalidTermsError('years', "must be at least 1")
        if self.payout_duration < 1:
            raise InvalidTermsError('payoutDuration', "must be at least 1")
        if self.deferral_start_year < 0:
            raise InvalidTermsError('deferralStartYear', "cannot be negative")
        if self.total_value < 0:
            raise InvalidTermsError('totalValue', "cannot be negative")
        if self.deferral_amount < 0:
            raise InvalidTermsError('deferralAmount', "cannot be negative")
        if self.deferral_amount > self.total_value:
            raise InvalidTermsError('deferralAmount', "cannot exceed the total contract value")
        if self.interest_rate <= -100:
            raise InvalidTermsError('interestRate', "must be greater than -100")
