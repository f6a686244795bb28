"""
keras-bridge CLI - inspect the environment and saved models.
"""

import argparse
import json
import logging
import sys

from .infrastructure import get_environment_info, setup_logging
from .model import load_model
from .tracking import TrackerRegistry
from .utils import have_h5py, have_matplotlib, have_pillow, have_pyyaml, have_requests

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="keras-bridge utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show versions, backend and optional packages
  keras-bridge info

  # Print the summary of a saved model
  keras-bridge summary ./models/mnist_mlp.keras --line-length 100
""",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to the configured level)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show environment information")
    info.add_argument("--json", action="store_true", help="Print as JSON")

    summary = subparsers.add_parser("summary", help="Print a saved model's summary")
    summary.add_argument("path", help="Path to a saved model")
    summary.add_argument("--line-length", type=int, default=None)
    summary.add_argument(
        "--no-compile",
        action="store_true",
        help="Load without compiling (for models with custom losses)",
    )

    return parser.parse_args(argv)


def environment_report() -> dict:
    """Environment information, optional-package availability and trackers."""
    info = get_environment_info()
    info["optional_packages"] = {
        "h5py": have_h5py(),
        "pyyaml": have_pyyaml(),
        "requests": have_requests(),
        "pillow": have_pillow(),
        "matplotlib": have_matplotlib(),
    }
    info["trackers"] = TrackerRegistry.list_trackers()
    return info


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "info":
        report = environment_report()
        if args.json:
            print(json.dumps(report, indent=2))
        else:
            packages = report.pop("optional_packages")
            report["trackers"] = ", ".join(report["trackers"])
            for key, value in report.items():
                print(f"{key}: {value}")
            for name, available in packages.items():
                print(f"{name}: {'available' if available else 'missing'}")
        return 0

    if args.command == "summary":
        model = load_model(args.path, compile=not args.no_compile)
        model.summary(line_length=args.line_length)
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
