"""LevelForge CLI entry point.

Provides subcommands for serving the layout API, generating a single layout
to stdout and running structural diagnostics over a list of seeds. Accepts
configuration via flags and environment variables, with optional .env
loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()  # pragma: no cover
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    LevelForge Layout Generator

    Serve grid-based room layouts over HTTP, print a single layout, or check
    a batch of seeds for structural problems. Configuration can be provided
    via CLI flags or environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                          Bind address for the web server (default: 0.0.0.0)
          PORT                          Port for the web server (default: 5000)
          LEVELFORGE_WIDTH              Grid width in cells (default: 10)
          LEVELFORGE_LENGTH             Grid length in cells (default: 10)
          LEVELFORGE_ROOM_COUNT         Rooms grown by the random walk (default: 12)
          LEVELFORGE_SPECIAL_ROOM_COUNT Special rooms injected per layout (default: 1)
          LEVELFORGE_MAX_ITERATIONS     Failed attempts before the fallback (default: 20)
          LEVELFORGE_MAX_GRID_CELLS     Largest width x length accepted (default: 10000)
          LEVELFORGE_LOG_LEVEL          debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print one layout as a minimap
          python run.py generate --seed 42

          # Same layout as JSON on a 6x6 grid
          python run.py generate --seed 42 --width 6 --length 6 --rooms 8 --json

          # Check a few seeds; exits 1 when any layout has issues
          python run.py diagnose 1 2 3

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="LevelForge",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"LevelForge {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the layout HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask server exposing /api/layout/*",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a single layout and print its minimap (or JSON with --json).",
    )
    _add_layout_flags(gen_parser)
    gen_parser.add_argument("--seed", type=int, default=None, help="Deterministic seed (default: random)")
    gen_parser.add_argument("--json", action="store_true", help="Print the full layout as JSON")
    gen_parser.set_defaults(command="generate")

    # diagnose subcommand
    diag_parser = subparsers.add_parser(
        "diagnose",
        help="Check seeds for structural layout issues",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate each seed and report duplicate positions, unreachable rooms and unmatched doors.",
    )
    _add_layout_flags(diag_parser)
    diag_parser.add_argument("seeds", nargs="*", type=int, help="Seeds to check (default: 1..10)")
    diag_parser.set_defaults(command="diagnose")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _add_layout_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--width", type=int, default=None, help="Grid width (default: env or 10)")
    p.add_argument("--length", type=int, default=None, help="Grid length (default: env or 10)")
    p.add_argument("--rooms", type=int, default=None, help="Room count (default: env or 12)")
    p.add_argument("--special", type=int, default=None, help="Special room count (default: env or 1)")
    p.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        choices=["debug", "info", "warn", "error"],
        help="Structured log threshold for this run",
    )


def _layout_overrides(args) -> dict:
    return {
        "width": getattr(args, "width", None),
        "length": getattr(args, "length", None),
        "room_count": getattr(args, "rooms", None),
        "special_room_count": getattr(args, "special", None),
    }


def _cmd_generate(args) -> int:
    from levelforge.layout import ConfigurationError, LayoutConfig, LevelGenerator

    try:
        config = LayoutConfig.from_env(seed=args.seed, **_layout_overrides(args))
        result = LevelGenerator(config).generate()
    except (ConfigurationError, ValueError) as exc:
        # ValueError: unparsable LEVELFORGE_* value
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    if args.json:
        payload = {
            "status": result.status.value,
            "seed": result.seed,
            "attempts": result.attempts,
            "layout": result.context.to_dict() if result.context else None,
            "minimap": result.minimap,
            "metrics": result.metrics,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(f"seed={result.seed} status={result.status.value} attempts={result.attempts}")
        if result.minimap:
            print(result.minimap)
    return 0 if result.ok else 1


def _cmd_diagnose(args) -> int:
    from levelforge.layout import ConfigurationError
    from levelforge.layout.diagnostics import diagnose_seed

    seeds = args.seeds or list(range(1, 11))
    try:
        results = [diagnose_seed(s, **_layout_overrides(args)) for s in seeds]
    except (ConfigurationError, ValueError) as exc:
        # ValueError: unparsable LEVELFORGE_* value
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    print(json.dumps({"results": results}, indent=2))
    return 0 if all(r["ok"] for r in results) else 1


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args and getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    from levelforge.logging_utils import log, set_level

    if getattr(args, "log_level", None):
        set_level(args.log_level)
    elif getattr(args, "json", False) or mode == "diagnose":
        # stdout carries the JSON document; only errors (stderr) stay on
        set_level("error")

    if mode == "generate":
        return _cmd_generate(args)
    if mode == "diagnose":
        return _cmd_diagnose(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from levelforge.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}LevelForge Layout Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "LevelForge Layout Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    grid = f"{os.getenv('LEVELFORGE_WIDTH', '10')}x{os.getenv('LEVELFORGE_LENGTH', '10')}"
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Grid:'):12} {value(grid)}",
        f"  {label('Cache:'):12} {value('off' if os.getenv('LEVELFORGE_DISABLE_CACHE') == '1' else 'on')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port)

    info_prefix = f"{Fore.CYAN}[INFO]{Style.RESET_ALL}" if _COLOR_ENABLED else "[INFO]"
    print(f"{info_prefix} Listening for connections... Press Ctrl+C to stop.")
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def cli() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(cli())
