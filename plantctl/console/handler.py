from plantctl.local.arguments import MACROS


def print_help() -> None:
    """Prints the usage text for the launcher."""
    print("\nUsage: plantctl [+MACRO | OPTIONS]")
    print("\nOptions:")
    print("  -a, --app FILE     - Application script to run (default: app.js).")
    print("  -c, --clean        - Delete generated assets of the selected mode(s).")
    print("  -d, --debug        - Build debug assets and start the server in the background.")
    print("  -e, --example      - Start the server with --example (seed example data).")
    print("  -h, --help         - Show this help message.")
    print("  -k, --kill         - Stop previous instances (monitor and PID file).")
    print("  -n, --no-start     - Do not start a server.")
    print("  -p, --production   - Build production assets and start under the process monitor.")
    print("  -r, --rebuild      - Regenerate every asset regardless of timestamps.")
    print("  -u, --update       - Update stale assets (both modes unless -d or -p).")
    print("  -w, --watch        - Keep watching asset sources and rebuild on change.")
    print("  -v, --verbose      - Show DEBUG output on the console.")
    print("      --appendlog    - Append to the log files instead of truncating them.")
    print("      --no-kill      - Do not stop previous instances before starting.")
    print("\nMacros:")
    for macro, expansion in MACROS.items():
        print(f"  {macro:<18} - same as {expansion}")
    print("\nExit codes: 0 ok, 1 usage/missing input, 2 asset update failed, 3 merge failed,")
    print("other: exit code of a failing external command.")
    print()
