"""
Export or import the whole store as JSON.

Usage:
    python -m scripts.transfer export backup.json
    python -m scripts.transfer import backup.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from core.config import configure_logging
from core.storage import get_repository
from core.transfer import export_data, import_data


def main() -> int:
    parser = argparse.ArgumentParser(description="Export / import vocabulary data")
    parser.add_argument("command", choices=["export", "import"])
    parser.add_argument("path", type=Path, help="JSON file to write or read")
    parser.add_argument("--backend", choices=["memory", "sql", "mongo"], default=None,
                        help="Storage backend (default: STORAGE_BACKEND)")
    args = parser.parse_args()

    configure_logging()
    repo = get_repository(args.backend)

    if args.command == "export":
        args.path.parent.mkdir(parents=True, exist_ok=True)
        args.path.write_text(export_data(repo), encoding="utf-8")
        print(f"✓ Exported to {args.path}")
        return 0

    if not import_data(repo, args.path.read_text(encoding="utf-8")):
        print(f"✗ Could not import {args.path}")
        return 1
    print(f"✓ Imported {len(repo.get_all_cards())} cards from {args.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
