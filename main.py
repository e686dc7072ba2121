"""extman: Extension Dependency Manager

Computes safe load and unload orders for pluggable extensions that
declare versions and version-ranged dependencies on each other.

Usage:
    python main.py plan-load net
    python main.py --manifest extensions.json plan-unload net
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from extman.cli.cli import cli


def main():
    """Main entry point."""
    cli(prog_name="extman")


if __name__ == "__main__":
    main()
