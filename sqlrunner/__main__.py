"""Entry point for sqlrunner."""

import sys


def main():
    """Main entry point with argument handling."""
    data_dir = None
    verbose = False
    args = sys.argv[1:]

    while args:
        arg = args.pop(0)
        lowered = arg.lower()

        if lowered in ("--help", "-h"):
            print("SqlRunner - run SQL against SQLite or SQL Server")
            print()
            print("Usage: sqlrunner [options]")
            print()
            print("Options:")
            print("  --data-dir PATH   Keep SqlRuner/history.db below PATH")
            print("  --verbose, -v     Log debug messages")
            print("  --help, -h        Show this help message")
            print()
            print("Run without arguments to start the application.")
            sys.exit(0)

        elif lowered == "--data-dir":
            if not args:
                print("--data-dir needs a path", file=sys.stderr)
                sys.exit(2)
            data_dir = args.pop(0)

        elif lowered.startswith("--data-dir="):
            data_dir = arg.split("=", 1)[1]

        elif lowered in ("--verbose", "-v"):
            verbose = True

        else:
            print(f"Unknown option: {arg}", file=sys.stderr)
            sys.exit(2)

    from sqlrunner.log import configure_logging
    configure_logging(verbose)

    # Start the GUI application
    from sqlrunner.qt.app import main as app_main
    sys.exit(app_main(data_dir))


if __name__ == "__main__":
    main()
