"""
Command-line interface for the ride setup calculators.
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from ..calculator import (
    RideCalcError,
    SuspensionInput,
    TirePressureParams,
    analyze_chainline,
    calculate_chain_length,
    calculate_suspension_settings,
    calculate_tire_pressure,
    compare_setups,
    to_json,
    to_markdown,
    to_summary,
)
from ..calculator.constants import DEFAULT_CADENCE_RPM, DEFAULT_GEAR_WEIGHT_KG
from ..enums import BikeCategory, FrameType, RidingStyle, SurfaceCondition, Terrain
from ..io.loaders import build_setup, load_catalog_json, save_result_json

logger = logging.getLogger(__name__)


def _choices(enum_cls):
    return [member.value for member in enum_cls]


def _run_tire_pressure(args):
    params = TirePressureParams(
        rider_weight_kg=args.rider_weight,
        bike_weight_kg=args.bike_weight,
        tire_width_mm=args.tire_width,
        wheel_diameter_in=args.wheel_diameter,
        terrain=args.terrain,
        tubeless=args.tubeless,
        conditions=args.conditions,
        priority=args.priority,
    )
    return calculate_tire_pressure(params)


def _run_suspension(args):
    inp = SuspensionInput(
        rider_weight_kg=args.rider_weight,
        gear_weight_kg=args.gear_weight,
        bike_category=args.category,
        riding_style=args.style,
        terrain=args.terrain,
        fork_model=args.fork,
        shock_model=args.shock,
    )
    return calculate_suspension_settings(inp)


def _run_chain_length(args):
    return calculate_chain_length(args.chainring, args.largest_cog, args.chainstay)


def _run_chainline(args):
    return analyze_chainline(
        args.chainring_offset, args.cassette_offset, args.chainstay, args.frame
    )


def _run_compare(args):
    print(f"Loading catalog from {args.catalog}...", file=sys.stderr)
    catalog = load_catalog_json(args.catalog)
    current = build_setup(catalog, args.current.split(','))
    proposed = build_setup(catalog, args.proposed.split(','))
    return compare_setups(current, proposed, cadence_rpm=args.cadence)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ridecalc',
        description="Bicycle drivetrain, tire pressure and suspension setup calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Tire pressure for an 80kg rider on a 14kg trail bike with 2.4" tires
  ridecalc tire-pressure --rider-weight 80 --bike-weight 14 --tire-width 61 --terrain trail --tubeless

  # Suspension baseline for an enduro bike with a Fox 38
  ridecalc suspension --rider-weight 78 --category enduro --fork "Fox 38 GRIP2"

  # Chain length for 32T ring, 52T cog, 435mm chainstays
  ridecalc chain-length --chainring 32 --largest-cog 52 --chainstay 435

  # Chainline check on a Boost frame
  ridecalc chainline --chainring-offset 49 --cassette-offset 2 --chainstay 435 --frame boost

  # Compare two drivetrains from a component catalog, as JSON
  ridecalc compare --catalog parts.json --current xt-m8100,ring-32,hub-hg \\
      --proposed gx-eagle,ring-32 --json
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--save-json', type=str, default=None, metavar='PATH',
                        help='Also write the JSON result to a file')

    sub = parser.add_subparsers(dest='command', required=True)

    tire = sub.add_parser('tire-pressure', help='Recommend front/rear tire pressure')
    tire.add_argument('--rider-weight', type=float, required=True, help='Rider weight in kg')
    tire.add_argument('--bike-weight', type=float, required=True, help='Bike weight in kg')
    tire.add_argument('--tire-width', type=float, required=True, help='Tire width in mm')
    tire.add_argument('--wheel-diameter', type=float, default=29.0,
                      help='Wheel diameter in inches (default: 29)')
    tire.add_argument('--terrain', default='trail',
                      help=f"One of {', '.join(_choices(Terrain))} (default: trail)")
    tire.add_argument('--conditions', default='dry',
                      help=f"One of {', '.join(_choices(SurfaceCondition))} (default: dry)")
    tire.add_argument('--priority', default='balanced',
                      help=f"One of {', '.join(_choices(RidingStyle))} (default: balanced)")
    tire.add_argument('--tubeless', action='store_true', help='Tubeless setup')
    tire.set_defaults(func=_run_tire_pressure)

    susp = sub.add_parser('suspension', help='Baseline fork and shock settings')
    susp.add_argument('--rider-weight', type=float, required=True, help='Rider weight in kg')
    susp.add_argument('--gear-weight', type=float, default=DEFAULT_GEAR_WEIGHT_KG,
                      help=f'Riding gear weight in kg (default: {DEFAULT_GEAR_WEIGHT_KG:g})')
    susp.add_argument('--category', default='trail',
                      help=f"One of {', '.join(_choices(BikeCategory))} (default: trail)")
    susp.add_argument('--style', default='balanced',
                      help=f"One of {', '.join(_choices(RidingStyle))} (default: balanced)")
    susp.add_argument('--terrain', default='trail', help='Terrain (default: trail)')
    susp.add_argument('--fork', default=None, help='Fork model tag, e.g. "Fox 36 GRIP2"')
    susp.add_argument('--shock', default=None, help='Shock model tag, e.g. "Float X2"')
    susp.set_defaults(func=_run_suspension)

    chain = sub.add_parser('chain-length', help='Chain length in links')
    chain.add_argument('--chainring', type=int, required=True, help='Largest chainring teeth')
    chain.add_argument('--largest-cog', type=int, required=True, help='Largest cog teeth')
    chain.add_argument('--chainstay', type=float, required=True, help='Chainstay length in mm')
    chain.set_defaults(func=_run_chain_length)

    line = sub.add_parser('chainline', help='Chainline deviation and efficiency')
    line.add_argument('--chainring-offset', type=float, required=True,
                      help='Chainring distance from frame centre in mm')
    line.add_argument('--cassette-offset', type=float, default=0.0,
                      help='Lateral cassette offset in mm (default: 0)')
    line.add_argument('--chainstay', type=float, required=True, help='Chainstay length in mm')
    line.add_argument('--frame', default='mtb',
                      help=f"One of {', '.join(_choices(FrameType))} (default: mtb)")
    line.set_defaults(func=_run_chainline)

    comp = sub.add_parser('compare', help='Compare current and proposed drivetrains')
    comp.add_argument('--catalog', required=True, help='Component catalog JSON file')
    comp.add_argument('--current', required=True, help='Comma-separated component ids')
    comp.add_argument('--proposed', required=True, help='Comma-separated component ids')
    comp.add_argument('--cadence', type=float, default=DEFAULT_CADENCE_RPM,
                      help=f'Cadence for top speed (default: {DEFAULT_CADENCE_RPM:g} rpm)')
    comp.add_argument('--markdown', action='store_true', help='Print a markdown report')
    comp.set_defaults(func=_run_compare)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    logger.debug(f"Running {args.command}")

    try:
        result = args.func(args)
    except (RideCalcError, ValidationError, KeyError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.save_json:
        save_result_json(result, args.save_json)
        print(f"Saved result to {args.save_json}", file=sys.stderr)

    if args.json:
        print(to_json(result))
    elif getattr(args, 'markdown', False):
        print(to_markdown(result))
    else:
        print(to_summary(result))

    return 0


if __name__ == '__main__':
    sys.exit(main())
