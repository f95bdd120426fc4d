"""Field metadata for YearlyRecord and CalculationResult fields.

This module provides descriptions and short names for schedule fields.
Short names are used as column headers in tables and as labels in the
summary and MCP output.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Timeline
    "year": FieldInfo("Year", "Timeline year, starting at 1"),
    "label": FieldInfo("Period", "Earning year (Year N) or payout year (Deferred M)"),
    "is_earning_year": FieldInfo("Earning Year", "True during the contract's earning period"),

    # Earned
    "cash_salary": FieldInfo("Cash Salary", "Salary paid in the year it is earned"),
    "deferred_earned": FieldInfo("Deferred Earned", "Nominal compensation earned this year but paid later"),
    "recognized_value": FieldInfo("Tax Value", "Value recognized this year for tax purposes (cash plus discounted deferral)"),

    # Received
    "deferred_payout": FieldInfo("Deferred Payout", "Deferred installment paid this year"),
    "cash_received": FieldInfo("Cash Received", "Cash actually received this year (salary plus deferred payout)"),
    "cumulative_received": FieldInfo("Cumulative Received", "Running total of cash received"),

    # Summary
    "nominal_aav": FieldInfo("Nominal AAV", "Total value / years, ignoring the time value of money"),
    "tax_aav": FieldInfo("Tax AAV", "Total recognized present value / years"),
    "total_recognized_pv": FieldInfo("Total Present Value", "Cash salary plus present value of all deferred installments"),
    "total_deferred_pv": FieldInfo("Deferred PV", "Present value of the deferred installments alone"),
    "effective_discount": FieldInfo("Discount", "Percent by which the tax AAV falls below the nominal AAV"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.
    
    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.
    
    Args:
        text: The header text to wrap
        max_width: Maximum width per line
        
    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]
    
    words = text.split()
    lines = []
    current_line = ""
    
    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word
    
    if current_line:
        lines.append(current_line)
    
    return lines
