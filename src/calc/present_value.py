"""Present value discounting.

Rates are human percentages (4.43 means 4.43%). Delays are in years and
may be fractional or negative; a negative delay inflates the amount.
"""


def discount_factor(years_of_delay: float, annual_rate_percent: float) -> float:
    """Multiplier that converts an amount paid after years_of_delay to today's value."""
    return 1 / (1 + annual_rate_percent / 100) ** years_of_delay


def present_value(future_amount: float, years_of_delay: float, annual_rate_percent: float) -> float:
    """Discount a future payment back to the valuation date.

    PV = FV / (1 + rate / 100) ** years_of_delay

    Args:
        future_amount: Nominal amount paid in the future
        years_of_delay: Years between the valuation date and the payment
        annual_rate_percent: Annual discount rate as a percentage

    Returns:
        The present value of the payment
    """
    return future_amount / (1 + annual_rate_percent / 100) ** years_of_delay
