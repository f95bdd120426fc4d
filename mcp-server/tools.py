"""Deferred Contract Calculator Tools for MCP Server.

This module provides the tool implementations that wrap the contract
calculator and expose its results through MCP.
"""

import os
import sys
from typing import Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.contract_calculator import calculate_schedule, RECOGNITION_EARNED
from model.ContractSchedule import CalculationResult, YearlyRecord
from model.ContractTerms import ContractTerms, SPEC_KEYS
from programs import list_programs, load_program_spec


# camelCase argument names accepted by calculate_contract
TERM_ARGUMENTS = tuple(SPEC_KEYS.values())


def summarize(result: CalculationResult) -> dict:
    """Headline metrics of a calculation, rounded for display."""
    terms = result.terms
    return {
        "terms": terms.to_spec(),
        "deferral_percent_of_total": round(terms.deferral_fraction * 100, 1),
        "nominal_aav": round(result.nominal_aav, 2),
        "tax_aav": round(result.tax_aav, 2),
        "total_present_value": round(result.total_recognized_pv, 2),
        "deferred_present_value": round(result.total_deferred_pv, 2),
        "effective_discount_percent": round(result.effective_discount, 2),
        "timeline_years": len(result.yearly_breakdown),
        "payout_window": {
            "first_year": terms.payout_start_year,
            "last_year": terms.payout_end_year
        },
        "recognition": result.recognition
    }


def record_to_dict(record: YearlyRecord) -> dict:
    """One yearly record, rounded for display."""
    return {
        "year": record.year,
        "label": record.label,
        "is_earning_year": record.is_earning_year,
        "cash_salary": round(record.cash_salary, 2),
        "deferred_earned": round(record.deferred_earned, 2),
        "recognized_value": round(record.recognized_value, 2),
        "deferred_payout": round(record.deferred_payout, 2),
        "cash_received": round(record.cash_received, 2),
        "cumulative_received": round(record.cumulative_received, 2)
    }


def calculate_contract(arguments: dict, recognition: str = RECOGNITION_EARNED) -> dict:
    """Calculate ad-hoc terms given as camelCase arguments.

    Raises:
        InvalidTermsError: If the terms are missing a key or fail validation
    """
    terms = ContractTerms.from_spec(arguments)
    result = calculate_schedule(terms, recognition)
    return {
        "summary": summarize(result),
        "yearly_breakdown": [record_to_dict(r) for r in result.yearly_breakdown]
    }


class ContractTools:
    """Tools that wrap the contract calculator for one program."""

    def __init__(self, base_path: str, program_name: str):
        """Initialize with paths and calculate the program's contract.

        Args:
            base_path: Path to the repository root
            program_name: Name of the program folder in input-parameters
        """
        self.base_path = base_path
        self.program_name = program_name
        self.spec = load_program_spec(program_name, base_path)
        self.terms = ContractTerms.from_spec(self.spec)
        self.result: CalculationResult = calculate_schedule(self.terms)

    def get_contract_summary(self) -> dict:
        """Get the headline metrics of the contract."""
        summary = summarize(self.result)
        summary["program_name"] = self.program_name
        summary["description"] = self.spec.get('description', '')
        return summary

    def get_yearly_breakdown(self, year: Optional[int] = None) -> dict:
        """Get one timeline year, or every year when year is None."""
        if year is None:
            return {
                "years": [record_to_dict(r) for r in self.result.yearly_breakdown],
                "total_cash_received": round(self.result.total_cash_received, 2)
            }

        record = self.result.get_year(year)
        if record is None:
            return {"error": f"Year {year} is not in the contract timeline (1-{len(self.result.yearly_breakdown)})"}
        return record_to_dict(record)

    def compare_rates(self, rates: List[float]) -> dict:
        """Recalculate the contract at each discount rate."""
        comparisons = []
        for rate in rates:
            result = calculate_schedule(self.terms.replace(interest_rate=rate))
            comparisons.append({
                "interest_rate": rate,
                "tax_aav": round(result.tax_aav, 2),
                "total_present_value": round(result.total_recognized_pv, 2),
                "effective_discount_percent": round(result.effective_discount, 2)
            })

        return {
            "nominal_aav": round(self.result.nominal_aav, 2),
            "base_interest_rate": self.terms.interest_rate,
            "comparisons": comparisons
        }


class MultiProgramTools:
    """Manager for multiple contract programs.

    Discovers all available programs and caches their calculations,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the repository root
            default_program: Default program to use when none specified
        """
        self.base_path = base_path
        self.programs: Dict[str, ContractTools] = {}
        self.requested_default = default_program
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        for name in list_programs(self.base_path):
            try:
                self.programs[name] = ContractTools(self.base_path, name)
            except (OSError, ValueError) as e:
                # Log but don't fail on individual program errors
                print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None) -> ContractTools:
        """Get the specified program or default.

        Raises:
            ValueError: If the program is not loaded
        """
        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            programs_info[name] = {
                "description": tools.spec.get('description', ''),
                "terms": tools.terms.to_spec()
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache.

        Use this after adding, modifying, or removing program spec.json files
        to pick up changes without restarting the server.
        """
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = self.requested_default

        self._discover_programs()

        new_programs = set(self.programs.keys())

        added = new_programs - old_programs
        removed = old_programs - new_programs
        unchanged = old_programs & new_programs

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(added),
                "removed": sorted(removed),
                "reloaded": sorted(unchanged)
            }
        }

    def get_contract_summary(self, program: Optional[str] = None) -> dict:
        """Get the headline metrics of the specified program."""
        return self._get_program(program).get_contract_summary()

    def get_yearly_breakdown(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        """Get yearly records of the specified program."""
        result = self._get_program(program).get_yearly_breakdown(year)
        result["program"] = program or self.default_program
        return result

    def compare_rates(self, rates: List[float], program: Optional[str] = None) -> dict:
        """Compare the specified program across discount rates."""
        result = self._get_program(program).compare_rates(rates)
        result["program"] = program or self.default_program
        return result

    def compare_programs(self, program1: str, program2: str) -> dict:
        """Compare the headline metrics of two programs.

        Deltas are program2 minus program1.
        """
        summary1 = self._get_program(program1).get_contract_summary()
        summary2 = self._get_program(program2).get_contract_summary()

        metrics = ['nominal_aav', 'tax_aav', 'total_present_value', 'effective_discount_percent']
        deltas = {m: round(summary2[m] - summary1[m], 2) for m in metrics}

        lower_tax_hit = program1 if summary1['tax_aav'] <= summary2['tax_aav'] else program2
        return {
            "program1": summary1,
            "program2": summary2,
            "difference": deltas,
            "lower_tax_aav": lower_tax_hit
        }


