"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import ContractTools, MultiProgramTools, calculate_contract, summarize, TERM_ARGUMENTS
from model.ContractTerms import InvalidTermsError


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with input-parameters/<program>/spec.json
    for every program in the fixtures.
    """
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    shutil.copytree(FIXTURES_PATH, input_params_dir)

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


SMALL_ARGUMENTS = {
    'totalValue': 100,
    'years': 2,
    'deferralAmount': 20,
    'deferralStartYear': 0,
    'payoutDuration': 1,
    'interestRate': 10
}


class TestContractTools:
    """Tests for ContractTools class."""

    @pytest.fixture
    def tools(self, test_base_path):
        """Create a ContractTools instance using testprogram."""
        return ContractTools(test_base_path, 'testprogram')

    def test_init_loads_spec(self, tools):
        """Test that initialization loads the spec and terms."""
        assert tools.spec['description'] == 'Heavily deferred test contract'
        assert tools.terms.total_value == 700000000
        assert len(tools.result.yearly_breakdown) == 21

    def test_get_contract_summary(self, tools):
        """Test the headline metrics."""
        summary = tools.get_contract_summary()

        assert summary['program_name'] == 'testprogram'
        assert summary['nominal_aav'] == 70000000
        assert summary['tax_aav'] < summary['nominal_aav']
        assert summary['effective_discount_percent'] > 0
        assert summary['deferral_percent_of_total'] == 97.1
        assert summary['timeline_years'] == 21
        assert summary['payout_window'] == {'first_year': 11, 'last_year': 20}
        assert summary['terms']['interestRate'] == 4.43

    def test_get_yearly_breakdown_all_years(self, tools):
        """Test that all years are returned when no year is given."""
        result = tools.get_yearly_breakdown()

        assert len(result['years']) == 21
        assert [y['year'] for y in result['years']] == list(range(1, 22))
        assert result['total_cash_received'] == pytest.approx(700000000)

    def test_get_yearly_breakdown_single_year(self, tools):
        """Test a single payout year."""
        record = tools.get_yearly_breakdown(11)

        assert record['label'] == 'Deferred 1'
        assert record['is_earning_year'] is False
        assert record['deferred_payout'] == pytest.approx(68000000)
        assert record['recognized_value'] == 0

    def test_get_yearly_breakdown_out_of_range(self, tools):
        """Test that a year outside the timeline returns an error."""
        assert 'error' in tools.get_yearly_breakdown(22)
        assert 'error' in tools.get_yearly_breakdown(0)

    def test_compare_rates(self, tools):
        """Test that higher rates give lower tax AAVs."""
        result = tools.compare_rates([2.5, 4.43, 6.0])
        tax_aavs = [c['tax_aav'] for c in result['comparisons']]

        assert result['base_interest_rate'] == 4.43
        assert tax_aavs[0] > tax_aavs[1] > tax_aavs[2]
        assert tax_aavs[1] == tools.get_contract_summary()['tax_aav']

    def test_compare_rates_invalid_rate(self, tools):
        """Test that an impossible rate is rejected."""
        with pytest.raises(InvalidTermsError):
            tools.compare_rates([-150])


class TestCalculateContract:
    """Tests for the ad-hoc calculate_contract tool."""

    def test_term_arguments(self):
        """Test the list of required argument names."""
        assert set(TERM_ARGUMENTS) == set(SMALL_ARGUMENTS)

    def test_calculates_explicit_terms(self):
        """Test a contract small enough to check by hand."""
        result = calculate_contract(SMALL_ARGUMENTS)

        assert result['summary']['nominal_aav'] == 50
        assert result['summary']['tax_aav'] == pytest.approx((90 + 10 / 1.1) / 2, abs=0.01)
        assert [y['cash_received'] for y in result['yearly_breakdown']] == [40, 60, 0]

    def test_averaged_recognition(self):
        """Test that averaged recognition is passed through."""
        result = calculate_contract(SMALL_ARGUMENTS, 'averaged')
        tax_aav = result['summary']['tax_aav']

        assert result['summary']['recognition'] == 'averaged'
        assert result['yearly_breakdown'][0]['recognized_value'] == pytest.approx(tax_aav, abs=0.01)

    def test_missing_argument(self):
        """Test that a missing term is reported by name."""
        arguments = dict(SMALL_ARGUMENTS)
        del arguments['interestRate']

        with pytest.raises(InvalidTermsError, match='interestRate'):
            calculate_contract(arguments)

    def test_invalid_terms(self):
        """Test that validation runs on ad-hoc terms."""
        with pytest.raises(InvalidTermsError, match='payoutDuration'):
            calculate_contract(dict(SMALL_ARGUMENTS, payoutDuration=0))

    def test_result_is_json_serializable(self):
        """Test that the result can be sent as MCP text content."""
        json.dumps(calculate_contract(SMALL_ARGUMENTS))


class TestMultiProgramTools:
    """Tests for MultiProgramTools class."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProgramTools(test_base_path)

    def test_discovers_programs(self, multi_tools):
        """Test that every fixture program is loaded."""
        assert set(multi_tools.programs) == {'testprogram', 'cashprogram'}
        assert multi_tools.default_program == 'cashprogram'

    def test_explicit_default(self, test_base_path):
        """Test that the requested default is used."""
        tools = MultiProgramTools(test_base_path, 'testprogram')
        assert tools.get_contract_summary()['program_name'] == 'testprogram'

    def test_list_programs(self, multi_tools):
        """Test the program listing."""
        result = multi_tools.list_programs()

        assert sorted(result['available_programs']) == ['cashprogram', 'testprogram']
        assert result['programs_info']['cashprogram']['description'] == 'All cash test contract'
        assert result['programs_info']['testprogram']['terms']['years'] == 10

    def test_unknown_program(self, multi_tools):
        """Test that an unknown program raises a helpful error."""
        with pytest.raises(ValueError, match="Program 'nope' not found"):
            multi_tools.get_contract_summary('nope')

    def test_get_yearly_breakdown_names_program(self, multi_tools):
        """Test that the program name is attached to the result."""
        result = multi_tools.get_yearly_breakdown(program='cashprogram')

        assert result['program'] == 'cashprogram'
        assert len(result['years']) == 11

    def test_compare_rates_names_program(self, multi_tools):
        result = multi_tools.compare_rates([1.0], 'testprogram')
        assert result['program'] == 'testprogram'

    def test_compare_programs(self, multi_tools):
        """Test that the deferred program carries the lower tax AAV."""
        result = multi_tools.compare_programs('cashprogram', 'testprogram')

        assert result['program1']['nominal_aav'] == 20000000
        assert result['program2']['nominal_aav'] == 70000000
        assert result['difference']['nominal_aav'] == 50000000
        assert result['lower_tax_aav'] == 'cashprogram'
        assert result['program1']['effective_discount_percent'] == 0

    def test_bad_program_is_skipped(self, test_base_path, capsys):
        """Test that a broken spec is skipped with a warning."""
        bad_dir = os.path.join(test_base_path, 'input-parameters', 'broken')
        os.makedirs(bad_dir)
        with open(os.path.join(bad_dir, 'spec.json'), 'w') as f:
            json.dump({'totalValue': 100}, f)

        try:
            tools = MultiProgramTools(test_base_path)
            assert 'broken' not in tools.programs
            assert "Failed to load program 'broken'" in capsys.readouterr().err
        finally:
            shutil.rmtree(bad_dir)

    def test_null_spec_is_skipped(self, test_base_path, capsys):
        """Test that a spec.json holding null does not break discovery."""
        bad_dir = os.path.join(test_base_path, 'input-parameters', 'empty')
        os.makedirs(bad_dir)
        with open(os.path.join(bad_dir, 'spec.json'), 'w') as f:
            f.write('null')

        try:
            tools = MultiProgramTools(test_base_path)
            assert set(tools.programs) == {'testprogram', 'cashprogram'}
            assert "Failed to load program 'empty'" in capsys.readouterr().err
        finally:
            shutil.rmtree(bad_dir)

    def test_reload_programs(self, test_base_path):
        """Test that reload picks up added and removed programs."""
        tools = MultiProgramTools(test_base_path, 'testprogram')

        new_dir = os.path.join(test_base_path, 'input-parameters', 'newprogram')
        shutil.copytree(os.path.join(FIXTURES_PATH, 'cashprogram'), new_dir)
        try:
            result = tools.reload_programs()

            assert result['status'] == 'success'
            assert result['changes']['added'] == ['newprogram']
            assert result['changes']['removed'] == []
            assert result['changes']['reloaded'] == ['cashprogram', 'testprogram']
            assert result['default_program'] == 'testprogram'
        finally:
            shutil.rmtree(new_dir)

        result = tools.reload_programs()
        assert result['changes']['removed'] == ['newprogram']


def test_summarize_rounds_values(test_base_path):
    """Test that summary values are rounded to cents."""
    summary = summarize(ContractTools(test_base_path, 'testprogram').result)

    assert summary['tax_aav'] == round(summary['tax_aav'], 2)
