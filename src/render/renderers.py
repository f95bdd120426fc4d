"""Renderer classes for displaying contract calculation results.

This module contains renderer classes that handle the presentation logic
for different views of a contract. Each renderer takes the
CalculationResult and extracts the fields it needs. Formatting never
changes the underlying numbers.
"""

from abc import ABC, abstractmethod
from typing import List

from calc.contract_calculator import installment_schedule, year_label
from model.ContractSchedule import CalculationResult
from model.field_metadata import get_description, get_short_name, wrap_header


def format_money(amount: float) -> str:
    """Format an amount as whole US dollars, e.g. $70,000,000."""
    if amount < 0:
        return f"-${abs(amount):,.0f}"
    return f"${amount:,.0f}"


def format_millions(amount: float) -> str:
    """Format an amount in millions with at most one decimal, e.g. $46.1M."""
    if amount < 0:
        return "-" + format_millions(abs(amount))
    text = f"{amount / 1_000_000:,.1f}"
    if text.endswith('.0'):
        text = text[:-2]
    return f"${text}M"


def format_multiline_headers(columns: List[tuple], label_width: int = 12) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        label_width: Width of the leading Period column

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        lines = wrap_header(header, width)
        wrapped_headers.append((lines, width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at top so the last line of every header lines up
    for lines, width in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {get_short_name('label'):<{label_width}}"
        else:
            header_line = f"  {'':<{label_width}}"

        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * label_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def parse_year_range(year_range: str, data: CalculationResult) -> tuple:
    """Parse a year range string into start and end timeline years.

    Args:
        year_range: String in format 'start-end', 'start-', '-end' or a single year
        data: CalculationResult to get default years from

    Returns:
        Tuple of (start_year, end_year)

    Raises:
        ValueError: If a bound is not an integer
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else 1
    end_year = int(parts[1]) if parts[1] else len(data.yearly_breakdown)
    return (start_year, end_year)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: CalculationResult) -> None:
        """Render the data to output.

        Args:
            data: The CalculationResult to display
        """
        pass


class SummaryRenderer(BaseRenderer):
    """Renderer for the contract terms and headline metrics."""

    def render(self, data: CalculationResult) -> None:
        """Render the contract summary.

        Args:
            data: CalculationResult to summarize
        """
        terms = data.terms

        print()
        print("=" * 60)
        print(f"{'CONTRACT SUMMARY':^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("CONTRACT TERMS")
        print("-" * 60)
        print(f"  {'Total Value:':<40} {format_money(terms.total_value):>17}")
        print(f"  {'Contract Years:':<40} {terms.years:>17}")
        print(f"  {'Amount Deferred:':<40} {format_money(terms.deferral_amount):>17}")
        print(f"  {'  Share of Total Contract:':<40} {terms.deferral_fraction:>17.1%}")
        print(f"  {'Delay Before Payouts (years):':<40} {terms.deferral_start_year:>17}")
        print(f"  {'Payout Period (years):':<40} {terms.payout_duration:>17}")
        print(f"  {'Discount Rate:':<40} {terms.interest_rate / 100:>17.2%}")

        print()
        print("-" * 60)
        print("AVERAGE ANNUAL VALUE")
        print("-" * 60)
        print(f"  {get_short_name('nominal_aav') + ':':<40} {format_money(data.nominal_aav):>17}")
        print(f"  {get_short_name('tax_aav') + ':':<40} {format_money(data.tax_aav):>17}")
        print(f"  {get_short_name('effective_discount') + ':':<40} {data.effective_discount / 100:>17.1%}")

        print()
        print("-" * 60)
        print("PRESENT VALUE")
        print("-" * 60)
        print(f"  {'Cash Salary (undiscounted):':<40} {format_money(data.total_recognized_pv - data.total_deferred_pv):>17}")
        print(f"  {get_short_name('total_deferred_pv') + ':':<40} {format_money(data.total_deferred_pv):>17}")
        print(f"  {'-' * 40}")
        print(f"  {get_short_name('total_recognized_pv') + ':':<40} {format_money(data.total_recognized_pv):>17}")
        print(f"  {'Total Cash Received:':<40} {format_money(data.total_cash_received):>17}")
        print("=" * 60)
        print()


# Schedule table columns and their widths
SCHEDULE_FIELDS = [
    ("cash_salary", 14),
    ("deferred_earned", 14),
    ("recognized_value", 14),
    ("deferred_payout", 14),
    ("cash_received", 14),
    ("cumulative_received", 16),
]


class ScheduleRenderer(BaseRenderer):
    """Renderer for the year-by-year schedule table."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional year range.

        Args:
            start_year: First timeline year to display (defaults to 1)
            end_year: Last timeline year to display (defaults to the end of the payout window)
        """
        self.start_year = start_year
        self.end_year = end_year

    def render(self, data: CalculationResult) -> None:
        """Render the yearly schedule with totals for the displayed range.

        Args:
            data: CalculationResult containing the yearly breakdown
        """
        print()
        print("=" * 106)
        print(f"{'CONTRACT SCHEDULE':^106}")
        print("=" * 106)
        print()

        columns = [(get_short_name(field), width) for field, width in SCHEDULE_FIELDS]

        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        start = self.start_year if self.start_year is not None else 1
        end = self.end_year if self.end_year is not None else len(data.yearly_breakdown)

        total_salary = 0.0
        total_deferred = 0.0
        total_recognized = 0.0
        total_payout = 0.0
        total_received = 0.0

        for record in data.yearly_breakdown:
            if record.year < start or record.year > end:
                continue
            print(f"  {record.label:<12} ${record.cash_salary:>13,.0f} ${record.deferred_earned:>13,.0f} ${record.recognized_value:>13,.0f} ${record.deferred_payout:>13,.0f} ${record.cash_received:>13,.0f} ${record.cumulative_received:>15,.0f}")
            total_salary += record.cash_salary
            total_deferred += record.deferred_earned
            total_recognized += record.recognized_value
            total_payout += record.deferred_payout
            total_received += record.cash_received

        print(sep_line)
        print(f"  {'TOTAL':<12} ${total_salary:>13,.0f} ${total_deferred:>13,.0f} ${total_recognized:>13,.0f} ${total_payout:>13,.0f} ${total_received:>13,.0f}")
        print()
        for field, _ in SCHEDULE_FIELDS:
            print(f"  {get_short_name(field) + ':':<21} {get_description(field)}")
        print()
        print("=" * 106)
        print()


class InstallmentsRenderer(BaseRenderer):
    """Renderer showing how each deferred installment is discounted."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional range of earning years to display."""
        self.start_year = start_year
        self.end_year = end_year

    def render(self, data: CalculationResult) -> None:
        """Render one row per (earning year, payout year) installment.

        Args:
            data: CalculationResult whose terms are expanded into installments
        """
        print()
        print("=" * 80)
        print(f"{'DEFERRED INSTALLMENTS':^80}")
        print("=" * 80)
        print()
        print(f"  {'Earned':<8} {'Paid':<14} {'Delay':>6} {'Installment':>15} {'Factor':>10} {'Present Value':>17}")
        print(f"  {'-' * 8} {'-' * 14} {'-' * 6} {'-' * 15} {'-' * 10} {'-' * 17}")

        years = data.terms.years
        start = self.start_year if self.start_year is not None else 1
        end = self.end_year if self.end_year is not None else years

        total_nominal = 0.0
        total_pv = 0.0
        for detail in installment_schedule(data.terms):
            if detail.earning_year < start or detail.earning_year > end:
                continue
            paid = year_label(detail.payout_year, years)
            print(f"  {year_label(detail.earning_year, years):<8} {paid:<14} {detail.delay:>6} ${detail.nominal_amount:>14,.0f} {detail.discount_factor:>10.4f} ${detail.present_value:>16,.0f}")
            total_nominal += detail.nominal_amount
            total_pv += detail.present_value

        print(f"  {'-' * 8} {'-' * 14} {'-' * 6} {'-' * 15} {'-' * 10} {'-' * 17}")
        print(f"  {'TOTAL':<8} {'':<14} {'':>6} ${total_nominal:>14,.0f} {'':>10} ${total_pv:>16,.0f}")
        print()


class TimelineRenderer(BaseRenderer):
    """Text bar chart of cash received against the recognized tax value."""

    BAR_WIDTH = 40

    def render(self, data: CalculationResult) -> None:
        """Render one pair of bars per timeline year.

        Args:
            data: CalculationResult containing the yearly breakdown
        """
        print()
        print("=" * 80)
        print(f"{'FINANCIAL TIMELINE':^80}")
        print("=" * 80)
        print(f"  '#' {get_short_name('cash_received')}    '=' {get_short_name('recognized_value')}")
        print()

        peak = max(
            [max(r.cash_received, r.recognized_value) for r in data.yearly_breakdown] or [0.0]
        )
        scale = self.BAR_WIDTH / peak if peak > 0 else 0.0

        for record in data.yearly_breakdown:
            cash_bar = '#' * round(record.cash_received * scale)
            tax_bar = '=' * round(record.recognized_value * scale)
            print(f"  {record.label:<12} |{cash_bar:<{self.BAR_WIDTH}} {format_millions(record.cash_received):>9}")
            print(f"  {'':<12} |{tax_bar:<{self.BAR_WIDTH}} {format_millions(record.recognized_value):>9}")
            if record.year == data.terms.years and record.year < len(data.yearly_breakdown):
                print(f"  {'':<12} {'- contract ends ':-<{self.BAR_WIDTH + 11}}")
        print()


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'Schedule': ScheduleRenderer,
    'Installments': InstallmentsRenderer,
    'Timeline': TimelineRenderer,
}

# Modes whose renderer accepts a (start_year, end_year) range
RANGED_MODES = ('Schedule', 'Installments')
