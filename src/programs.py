"""Loading and saving named contract programs.

A program is a folder under input-parameters/ containing a spec.json with
the contract terms in camelCase, plus an optional description.
"""

import json
import os
from typing import Optional

from model.ContractTerms import ContractTerms


# Repository root, which holds the input-parameters directory
DEFAULT_BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))


def get_spec_path(program_name: str, base_path: str = DEFAULT_BASE_PATH) -> str:
    """Path to a program's spec.json (which may not exist)."""
    return os.path.join(base_path, 'input-parameters', program_name, 'spec.json')


def list_programs(base_path: str = DEFAULT_BASE_PATH) -> list[str]:
    """List all existing programs in the input-parameters directory.

    Args:
        base_path: Directory containing input-parameters

    Returns:
        Sorted list of program names
    """
    input_params_path = os.path.join(base_path, 'input-parameters')
    if not os.path.exists(input_params_path):
        return []

    programs = []
    for name in os.listdir(input_params_path):
        program_dir = os.path.join(input_params_path, name)
        spec_path = os.path.join(program_dir, 'spec.json')
        if os.path.isdir(program_dir) and os.path.exists(spec_path):
            programs.append(name)

    return sorted(programs)


def load_program_spec(program_name: str, base_path: str = DEFAULT_BASE_PATH) -> dict:
    """Load the raw spec dictionary for a program.

    Raises:
        FileNotFoundError: If the program has no spec.json
    """
    spec_path = get_spec_path(program_name, base_path)
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")

    with open(spec_path, 'r') as f:
        return json.load(f)


def load_program_terms(program_name: str, base_path: str = DEFAULT_BASE_PATH) -> ContractTerms:
    """Load a program's spec and convert it to ContractTerms.

    Raises:
        FileNotFoundError: If the program has no spec.json
        InvalidTermsError: If a contract key is missing or not numeric
    """
    return ContractTerms.from_spec(load_program_spec(program_name, base_path))


def save_program(program_name: str, terms: ContractTerms, base_path: str = DEFAULT_BASE_PATH,
                 description: Optional[str] = None) -> str:
    """Save contract terms as a program.

    Args:
        program_name: Name for the program folder
        terms: The contract terms to store
        base_path: Directory containing input-parameters
        description: Optional free-text description stored with the terms

    Returns:
        Path to the saved file
    """
    program_dir = os.path.join(base_path, 'input-parameters', program_name)
    os.makedirs(program_dir, exist_ok=True)

    spec = {}
    if description:
        spec['description'] = description
    spec.update(terms.to_spec())

    spec_path = os.path.join(program_dir, 'spec.json')
    with open(spec_path, 'w') as f:
        json.dump(spec, f, indent=4)

    return spec_path
