"""Command-line interface for POD order tools.

Usage:
    python -m pod_orders reconcile   # Match an order file and export a printer CSV
    python -m pod_orders batch       # Export several order files into one ZIP
    python -m pod_orders search      # Look up one title
    python -m pod_orders repository  # Repository stats, edits and snapshots
    python -m pod_orders --help      # Show help
"""

import sys


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Commands:")
        print("  reconcile   Match an order upload against the repository and export it")
        print("  batch       Process several order uploads into a ZIP of printer CSVs")
        print("  search      Look up a title by ISBN or master order ID")
        print("  repository  Repository statistics, authorized edits and snapshots")
        print()
        print("Run 'python -m pod_orders <command> --help' for command-specific help.")
        return 0

    command = sys.argv[1]
    # Remove the command from argv so subcommand parsers work correctly
    sys.argv = [f"pod_orders {command}"] + sys.argv[2:]

    if command == "reconcile":
        from .reconcile import main as reconcile_main

        return reconcile_main()
    elif command == "batch":
        from .reconcile import batch_main

        return batch_main()
    elif command == "search":
        from .search import main as search_main

        return search_main()
    elif command == "repository":
        from .manage import main as manage_main

        return manage_main()
    else:
        print(f"Unknown command: {command}")
        print("Run 'python -m pod_orders --help' for available commands.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
