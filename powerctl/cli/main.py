import argparse
import sys

from powerctl import __version__
from powerctl.core import paths
from powerctl.core import probe
from powerctl.core import settings
from powerctl.core.api import build_control
from powerctl.core.control import PowerControl
from powerctl.core.logs import setup_logging
from powerctl.core.results import StepOutcome, TransitionKind, TransitionResult

# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_WHITE = "\033[97m"

def print_separator(char="─", width=60):
    """Print a horizontal separator line"""
    print(f"{Colors.DIM}{char * width}{Colors.RESET}")

def print_info(label: str, value: str, indent: int = 0):
    """Print formatted info line"""
    spaces = "  " * indent
    print(f"{spaces}{Colors.CYAN}{label}:{Colors.RESET} {Colors.BRIGHT_WHITE}{value}{Colors.RESET}")

def print_success(message: str):
    """Print success message with checkmark"""
    print(f"{Colors.BRIGHT_GREEN}✓{Colors.RESET} {message}")

def print_warning(message: str):
    """Print warning message"""
    print(f"{Colors.BRIGHT_YELLOW}!{Colors.RESET} {message}")

def print_error(message: str):
    """Print error message"""
    print(f"{Colors.BRIGHT_RED}✗{Colors.RESET} {message}")

def print_header(text: str):
    """Print a header"""
    print(f"\n{Colors.BOLD}{Colors.BRIGHT_CYAN}{text}{Colors.RESET}")
    print_separator()

def print_step(step: StepOutcome):
    text = step.step
    if step.count is not None:
        text += f" ({step.count} locked)"
    if step.detail:
        text += f" {Colors.DIM}{step.detail}{Colors.RESET}"
    if step.ok:
        print_success(text)
    else:
        print_warning(text)

def yes_no(value: bool) -> str:
    return "yes" if value else "no"

def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="powerctl",
        description="powerctl - Suspend, hibernate and shut down through systemd-logind",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Print extra debug info")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser(
        "suspend",
        help="Suspend to RAM",
        description="""Suspend the machine.

Locks the keyring and puts NetworkManager to sleep first when configured,
then asks logind to suspend. Network is woken up again on resume.""",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    sub.add_parser(
        "hibernate",
        help="Suspend to disk",
        description="Hibernate the machine (same sequence as suspend).",
    )

    shutdown_cmd = sub.add_parser(
        "shutdown",
        help="Power off the machine",
        description="Ask logind to power off. Requires --yes.",
    )
    shutdown_cmd.add_argument("--yes", action="store_true", help="Really power off")

    sub.add_parser(
        "status",
        help="Show power manager availability and settings",
        description="Show whether logind is reachable and which settings are in effect."
    )

    config_cmd = sub.add_parser(
        "config",
        help="Show or change settings",
        description=f"""Show or change settings.

Settings file: {paths.SETTINGS_FILE}
Keys: {", ".join(settings.KEYS)}""",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    config_cmd.add_argument(
        "action",
        nargs="?",
        default="show",
        choices=["show", "set"],
        help="""Config action (default: show)
  • show - Print current settings
  • set  - Change one setting: config set KEY VALUE"""
    )
    config_cmd.add_argument("key", nargs="?", help="Setting name (for 'set')")
    config_cmd.add_argument("value", nargs="?", help="New value (for 'set')")

    return parser.parse_args(argv)

def show_settings(s: settings.PowerSettings):
    print_info("Source", settings.settings_source())
    print_info("Lock keyring on suspend", yes_no(s.lock_keyring_on_suspend))
    print_info("Lock keyring on hibernate", yes_no(s.lock_keyring_on_hibernate))
    print_info("Network sleep", yes_no(s.network_sleep))
    print_info("Keyring backend", s.keyring_backend)
    print_info("Assume resume on lost reply", yes_no(s.assume_resume_on_no_reply))

def run_transition(control: PowerControl, kind: TransitionKind) -> TransitionResult:
    print_header(kind.label.capitalize())

    def on_sleep(k: TransitionKind):
        print_info("Notification", f"sleep ({k.label})")

    def on_resume(k: TransitionKind):
        print_info("Notification", f"resume ({k.label})")

    ids = [control.connect("sleep", on_sleep), control.connect("resume", on_resume)]
    try:
        if kind is TransitionKind.SUSPEND:
            result = control.suspend()
        else:
            result = control.hibernate()
    finally:
        for handler_id in ids:
            control.disconnect(handler_id)

    for step in control.last_steps:
        print_step(step)
    return result

def report(result: TransitionResult):
    if result:
        print_success(f"{result.kind.capitalize()} done")
        return
    print_error(f"{result.kind.capitalize()} failed: {result.error}")
    raise SystemExit(1)

def main(argv=None):
    args = parse_arguments(argv)

    paths.ensure_directories()
    setup_logging(verbose=args.verbose)

    if args.verbose:
        print_header("Debug Information")
        print_info("Config directory", str(paths.CONFIG_DIR))
        print_info("Settings file", str(paths.SETTINGS_FILE))
        print_info("Log file", str(paths.LOG_FILE))
        print()

    try:
        if args.command in ("suspend", "hibernate"):
            kind = TransitionKind.SUSPEND if args.command == "suspend" else TransitionKind.HIBERNATE
            control = build_control()
            report(run_transition(control, kind))

        elif args.command == "shutdown":
            if not args.yes:
                print_warning("Refusing to power off without --yes")
                raise SystemExit(1)
            control = build_control()
            report(control.shutdown())

        elif args.command == "status":
            print_header("Power Manager")
            if probe.logind_running():
                print_success("systemd-logind is running")
            else:
                print_warning("systemd-logind is not running, transitions will fail")

            print_header("Settings")
            show_settings(settings.load_settings())
            print()

        elif args.command == "config":
            current = settings.load_settings()

            if args.action == "set":
                if not args.key or args.value is None:
                    print_error("Usage: powerctl config set KEY VALUE")
                    raise SystemExit(1)
                current = settings.with_value(current, args.key, args.value)
                settings.save_settings(current)
                print_success(f"{args.key} = {args.value}")

            print_header("Settings")
            show_settings(current)
            print()

    except KeyboardInterrupt:
        print()
        print_warning("Operation cancelled by user")
        raise SystemExit(130)
    except Exception as e:
        print()
        print_error(f"Error: {e}")
        if args.verbose:
            import traceback
            print()
            print(f"{Colors.DIM}{traceback.format_exc()}{Colors.RESET}")
        raise SystemExit(1)

if __name__ == "__main__":
    sys.exit(main())
