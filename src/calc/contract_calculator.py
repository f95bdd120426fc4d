"""Calculator for the amortization of deferred-compensation contracts.

Deferred money is recognized in the year it is earned at its present value.
Each earning year's deferred slice is paid out in equal installments over
the payout window, and every installment is discounted from its own payout
year back to the year it was earned.
"""

from typing import List

from calc.present_value import discount_factor, present_value
from model.ContractSchedule import CalculationResult, InstallmentDetail, YearlyRecord
from model.ContractTerms import ContractTerms


# Recognized value attributed to the year it was earned
RECOGNITION_EARNED = 'earned'
# Total recognized value spread evenly across the earning years
RECOGNITION_AVERAGED = 'averaged'

RECOGNITION_METHODS = (RECOGNITION_EARNED, RECOGNITION_AVERAGED)


def year_label(year: int, contract_years: int) -> str:
    """Label a timeline year as an earning year or a deferred payout year."""
    if year <= contract_years:
        return f"Year {year}"
    return f"Deferred {year - contract_years}"


def installment_schedule(terms: ContractTerms) -> List[InstallmentDetail]:
    """List every discounted installment of the deferred money.

    One entry per (earning year, payout installment) pair, ordered by
    earning year and then payout year.

    Args:
        terms: The contract terms

    Returns:
        List of InstallmentDetail entries. Pairs are listed with zero
        amounts when nothing is deferred.

    Raises:
        InvalidTermsError: If the terms fail validation
    """
    terms.validate()
    years = int(terms.years)
    payout_duration = int(terms.payout_duration)
    installment = terms.deferral_amount / years / payout_duration

    details = []
    for earning_year in range(1, years + 1):
        for p in range(payout_duration):
            payout_year = terms.payout_start_year + p
            delay = payout_year - earning_year
            details.append(InstallmentDetail(
                earning_year=earning_year,
                payout_year=payout_year,
                delay=delay,
                nominal_amount=installment,
                discount_factor=discount_factor(delay, terms.interest_rate),
                present_value=present_value(installment, delay, terms.interest_rate),
            ))
    return details


def calculate_schedule(terms: ContractTerms, recognition: str = RECOGNITION_EARNED) -> CalculationResult:
    """Amortize a contract into its yearly schedule and summary metrics.

    Args:
        terms: The contract terms
        recognition: RECOGNITION_EARNED attributes each year's discounted
            deferral to that year; RECOGNITION_AVERAGED gives every earning
            year the tax AAV. Totals are the same either way.

    Returns:
        CalculationResult with one YearlyRecord per timeline year

    Raises:
        InvalidTermsError: If the terms fail validation
        ValueError: If the recognition method is unknown
    """
    if recognition not in RECOGNITION_METHODS:
        raise ValueError(f"Unknown recognition method '{recognition}'. Expected one of {list(RECOGNITION_METHODS)}")
    details = installment_schedule(terms)

    years = int(terms.years)
    payout_duration = int(terms.payout_duration)

    yearly_total_earned = terms.total_value / years
    yearly_deferred_earned = terms.deferral_amount / years
    yearly_cash_salary = yearly_total_earned - yearly_deferred_earned

    # Discounted deferral recognized in each earning year (index 0 is year 1)
    deferred_pv_by_year = [0.0] * years
    for detail in details:
        deferred_pv_by_year[detail.earning_year - 1] += detail.present_value

    recognized_by_year = [yearly_cash_salary + pv for pv in deferred_pv_by_year]
    total_deferred_pv = sum(deferred_pv_by_year)
    total_recognized_pv = sum(recognized_by_year)

    nominal_aav = terms.total_value / years
    tax_aav = total_recognized_pv / years
    effective_discount = (nominal_aav - tax_aav) / nominal_aav * 100 if nominal_aav else 0.0

    if recognition == RECOGNITION_AVERAGED:
        recognized_by_year = [tax_aav] * years

    payout_start = terms.payout_start_year
    payout_end = terms.payout_end_year
    yearly_payout_check = terms.deferral_amount / payout_duration

    records = []
    cumulative = 0.0
    for year in range(1, int(terms.timeline_length) + 1):
        earning = year <= years
        cash_salary = yearly_cash_salary if earning else 0.0
        deferred_payout = yearly_payout_check if payout_start <= year <= payout_end else 0.0
        received = cash_salary + deferred_payout
        cumulative += received

        records.append(YearlyRecord(
            year=year,
            label=year_label(year, years),
            is_earning_year=earning,
            cash_salary=cash_salary,
            deferred_earned=yearly_deferred_earned if earning else 0.0,
            recognized_value=recognized_by_year[year - 1] if earning else 0.0,
            deferred_payout=deferred_payout,
            cash_received=received,
            cumulative_received=cumulative,
        ))

    return CalculationResult(
        terms=terms,
        nominal_aav=nominal_aav,
        tax_aav=tax_aav,
        total_recognized_pv=total_recognized_pv,
        total_deferred_pv=total_deferred_pv,
        effective_discount=effective_discount,
        yearly_breakdown=tuple(records),
        recognition=recognition,
    )
