"""Tests for the command line entry point."""

import os
import sys
import json
import shutil
import tempfile
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from Program import main
from programs import load_program_terms, save_program
from model.ContractTerms import ContractTerms


EXPLICIT_TERMS = [
    '--total-value', '100', '--years', '2', '--deferral-amount', '20',
    '--deferral-start-year', '0', '--payout-duration', '1', '--interest-rate', '10',
]


@pytest.fixture
def base_path():
    """Temporary repository root holding one program."""
    temp_dir = tempfile.mkdtemp()
    save_program('testprogram', ContractTerms(700000000, 10, 680000000, 1, 10, 4.43), temp_dir,
                 description='Test contract')
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def test_summary_is_default_mode(base_path, capsys):
    """Running a program prints the contract summary."""
    assert main(['testprogram'], base_path) == 0
    out = capsys.readouterr().out

    assert 'CONTRACT SUMMARY' in out
    assert '$70,000,000' in out
    assert 'Tax AAV' in out


def test_schedule_mode(base_path, capsys):
    """Schedule mode lists every timeline year."""
    assert main(['testprogram', '--mode', 'Schedule'], base_path) == 0
    out = capsys.readouterr().out

    assert 'CONTRACT SCHEDULE' in out
    assert 'Year 10' in out
    assert 'Deferred 11' in out


def test_schedule_year_range(base_path, capsys):
    """--years-range limits the schedule rows."""
    assert main(['testprogram', '-m', 'Schedule', '-r', '11-12'], base_path) == 0
    out = capsys.readouterr().out

    assert 'Deferred 1 ' in out
    assert 'Deferred 2 ' in out
    assert 'Year 1 ' not in out
    assert 'Deferred 3 ' not in out


def test_invalid_year_range(base_path, capsys):
    """A malformed year range is reported on stderr."""
    assert main(['testprogram', '-m', 'Schedule', '-r', 'a-b'], base_path) == 1
    assert 'Invalid year range' in capsys.readouterr().err


def test_flags_override_program(base_path, capsys):
    """Term flags replace the program's values."""
    assert main(['testprogram', '--interest-rate', '0', '--json'], base_path) == 0
    data = json.loads(capsys.readouterr().out)

    assert data['terms']['interestRate'] == 0
    assert data['tax_aav'] == pytest.approx(data['nominal_aav'])


def test_explicit_terms_without_program(base_path, capsys):
    """All six flags describe a contract without a program."""
    assert main(EXPLICIT_TERMS + ['--json'], base_path) == 0
    data = json.loads(capsys.readouterr().out)

    assert data['nominal_aav'] == pytest.approx(50)
    assert data['tax_aav'] == pytest.approx((90 + 10 / 1.1) / 2)
    assert [r['cash_received'] for r in data['yearly_breakdown']] == pytest.approx([40, 60, 0])


def test_missing_flags_without_program(base_path, capsys):
    """Without a program the missing flags are named."""
    assert main(['--total-value', '100'], base_path) == 1
    err = capsys.readouterr().err

    assert 'Invalid contract terms' in err
    assert '--years' in err
    assert '--interest-rate' in err


def test_invalid_terms_are_reported(base_path, capsys):
    """Validation failures print a field-level message and exit 1."""
    assert main(['testprogram', '--deferral-amount', '800000000'], base_path) == 1
    err = capsys.readouterr().err

    assert 'Invalid contract terms: deferralAmount: cannot exceed the total contract value' in err


def test_unknown_program(base_path, capsys):
    """An unknown program is reported on stderr."""
    assert main(['nope'], base_path) == 1
    assert 'Spec file not found' in capsys.readouterr().err


def test_list_programs(base_path, capsys):
    """--list prints each program with its description."""
    assert main(['--list'], base_path) == 0
    out = capsys.readouterr().out

    assert 'testprogram' in out
    assert 'Test contract' in out


def test_save_program(base_path, capsys):
    """--save stores the effective terms as a new program."""
    assert main(EXPLICIT_TERMS + ['--save', 'small'], base_path) == 0
    assert "Saved program 'small'" in capsys.readouterr().err

    assert load_program_terms('small', base_path) == ContractTerms(100, 2, 20, 0, 1, 10)


def test_averaged_recognition(base_path, capsys):
    """--recognition averaged gives every earning year the tax AAV."""
    assert main(EXPLICIT_TERMS + ['--recognition', 'averaged', '--json'], base_path) == 0
    data = json.loads(capsys.readouterr().out)

    recognized = [r['recognized_value'] for r in data['yearly_breakdown']]
    assert recognized == pytest.approx([data['tax_aav'], data['tax_aav'], 0.0])


@pytest.mark.parametrize("mode", ['Summary', 'Schedule', 'Installments', 'Timeline'])
def test_every_mode_renders(base_path, capsys, mode):
    """Each registered mode produces output."""
    assert main(['testprogram', '--mode', mode], base_path) == 0
    assert capsys.readouterr().out.strip()


def write_spec(base_path, name, text):
    """Write raw spec.json contents for a program."""
    program_dir = os.path.join(base_path, 'input-parameters', name)
    os.makedirs(program_dir, exist_ok=True)
    with open(os.path.join(program_dir, 'spec.json'), 'w') as f:
        f.write(text)


def test_malformed_program_is_reported(base_path, capsys):
    """A spec.json that is not valid JSON exits 1 with a message."""
    write_spec(base_path, 'broken', '{not json')

    assert main(['broken'], base_path) == 1
    assert 'Invalid program file' in capsys.readouterr().err


def test_null_program_is_reported(base_path, capsys):
    """A spec.json holding null is rejected as invalid terms."""
    write_spec(base_path, 'empty', 'null')

    assert main(['empty'], base_path) == 1
    assert 'Invalid contract terms: spec: must be a JSON object' in capsys.readouterr().err


@pytest.mark.parametrize("text", ['{not json', 'null', '[1, 2]'])
def test_list_skips_unreadable_programs(base_path, capsys, text):
    """--list warns about a bad program and still lists the others."""
    write_spec(base_path, 'broken', text)

    assert main(['--list'], base_path) == 0
    captured = capsys.readouterr()

    assert 'testprogram' in captured.out
    assert 'broken' not in captured.out
    assert "Failed to load program 'broken'" in captured.err
