import sys
import json
import argparse
from calc.contract_calculator import calculate_schedule, RECOGNITION_EARNED, RECOGNITION_METHODS
from model.ContractTerms import ContractTerms, InvalidTermsError, SPEC_KEYS
from programs import list_programs, load_program_spec, load_program_terms, save_program, DEFAULT_BASE_PATH
from render.renderers import RENDERER_REGISTRY, RANGED_MODES, parse_year_range


# ContractTerms fields that can be set with --field-name flags
TERM_FLAGS = tuple(SPEC_KEYS)


def build_terms(args: argparse.Namespace, base_path: str = DEFAULT_BASE_PATH) -> ContractTerms:
    """Build the contract terms from a program and/or explicit flags.

    Flags override the matching fields of the loaded program. Without a
    program every term flag must be given.

    Args:
        args: Parsed command line arguments
        base_path: Directory containing input-parameters

    Returns:
        The effective ContractTerms (not yet validated)
    """
    overrides = {name: getattr(args, name) for name in TERM_FLAGS if getattr(args, name) is not None}

    if args.program_name:
        return load_program_terms(args.program_name, base_path).replace(**overrides)

    missing = [name for name in TERM_FLAGS if name not in overrides]
    if missing:
        flags = ', '.join('--' + name.replace('_', '-') for name in missing)
        raise InvalidTermsError(SPEC_KEYS[missing[0]], f"no program given; missing {flags}")
    return ContractTerms(**overrides)


def main(argv=None, base_path: str = DEFAULT_BASE_PATH):
    parser = argparse.ArgumentParser(
        description='Deferred contract calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary       Print contract terms, nominal and tax AAV, and present value (default)
  Schedule      Print the year-by-year earned, recognized and received amounts
  Installments  Print how every deferred installment is discounted
  Timeline      Print a text bar chart of cash received vs recognized value

Examples:
  python src/Program.py ohtani
  python src/Program.py ohtani --mode Schedule
  python src/Program.py ohtani --mode Schedule --years-range 8-14
  python src/Program.py ohtani --interest-rate 2.5
  python src/Program.py --total-value 100000000 --years 5 --deferral-amount 20000000 \\
      --deferral-start-year 2 --payout-duration 5 --interest-rate 4.5
  python src/Program.py --list
        """
    )
    parser.add_argument('program_name', nargs='?', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--years-range', '-r',
                        help="Timeline years to show for Schedule/Installments, e.g. '3-7', '11-' or '5'")
    parser.add_argument('--recognition',
                        choices=list(RECOGNITION_METHODS),
                        default=RECOGNITION_EARNED,
                        help='Attribute tax value to the year earned (default) or average it over the contract')
    parser.add_argument('--total-value', type=float, help='Total nominal contract value')
    parser.add_argument('--years', type=int, help='Contract length in years')
    parser.add_argument('--deferral-amount', type=float, help='Portion of the total value that is deferred')
    parser.add_argument('--deferral-start-year', type=int, help='Years after the contract ends before payouts begin')
    parser.add_argument('--payout-duration', type=int, help='Years over which deferred money is paid')
    parser.add_argument('--interest-rate', type=float, help='Annual discount rate in percent, e.g. 4.43')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON instead of a report')
    parser.add_argument('--list', '-l', action='store_true', help='List available programs and exit')
    parser.add_argument('--save', metavar='NAME', help='Save the effective terms as a new program')

    args = parser.parse_args(argv)

    if args.list:
        for name in list_programs(base_path):
            try:
                spec = load_program_spec(name, base_path)
                ContractTerms.from_spec(spec)
            except (OSError, ValueError) as e:
                print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)
                continue
            description = spec.get('description', '')
            print(f"  {name:<20} {description}")
        return 0

    try:
        terms = build_terms(args, base_path)
        result = calculate_schedule(terms, args.recognition)
    except FileNotFoundError as e:
        print(e, file=sys.stderr)
        return 1
    except InvalidTermsError as e:
        print(f"Invalid contract terms: {e.field}: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Malformed spec.json
        print(f"Invalid program file: {e}", file=sys.stderr)
        return 1

    if args.save:
        spec_path = save_program(args.save, terms, base_path)
        print(f"Saved program '{args.save}' to {spec_path}", file=sys.stderr)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    if args.mode in RANGED_MODES and args.years_range:
        try:
            start_year, end_year = parse_year_range(args.years_range, result)
        except ValueError:
            print(f"Invalid year range: {args.years_range}", file=sys.stderr)
            return 1
        renderer = RENDERER_REGISTRY[args.mode](start_year, end_year)
    else:
        renderer = RENDERER_REGISTRY[args.mode]()
    renderer.render(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
