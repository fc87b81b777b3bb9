"""Main entry point for idleguard."""

import argparse
import sys
from pathlib import Path

from idleguard.runtime.controller import RuntimeController


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="idleguard - idle-session guard with countdown warning"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--url",
        "-u",
        default=None,
        help="URL of the guarded page (overrides host.page_url)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args()

    if args.version:
        from idleguard import __version__

        print(f"idleguard v{__version__}")
        return 0

    try:
        controller = RuntimeController(config_path=args.config, page_url=args.url)
        controller.start()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
