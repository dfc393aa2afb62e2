"""Labyrinth CLI entry point.

Provides subcommands for generating a maze on the terminal and for running
the HTTP API. Accepts configuration via flags and environment variables, with
optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def _colors_enabled(no_color: bool) -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    if no_color or os.getenv("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - closed/replaced stdout
        return False


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Labyrinth Maze Generator

    Generate puzzle mazes (keys, doors, levers, batteries) on the terminal, or
    serve them over a small JSON API. Configuration can be provided via CLI
    flags or MAZE_* environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          MAZE_WIDTH / MAZE_HEIGHT   Maze size in rooms (default: 13)
          MAZE_SEED                  Seed (int or any string)
          MAZE_NUM_ENERGY            Filler energy orbs (default: 20)
          MAZE_NUM_DRONES            Filler drones (default: 10)
          MAZE_NUM_ROCKS             Filler rocks (default: 15)
          MAZE_MAX_ATTEMPTS          Main path retry cap (default: unbounded)
          HOST / PORT                Bind address for the API server

        Examples:
          # Print a 13x13 maze
          python run.py

          # Reproducible maze from a word seed, as JSON
          python run.py generate --seed lantern --json

          # Custom start room
          python run.py generate --template rooms/start.txt --width 20 --height 20

          # Run the API on a custom port
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="Labyrinth",
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
        "--log-level",
        dest="log_level",
        choices=("debug", "info", "warn", "error"),
        help="Structured log threshold (default: env LABYRINTH_LOG_LEVEL or warn)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Labyrinth Maze Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a maze and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a maze and print it as level text or JSON",
    )
    gen_parser.add_argument("--width", type=int, default=None, help="Rooms across (default: env MAZE_WIDTH or 13)")
    gen_parser.add_argument("--height", type=int, default=None, help="Rooms down (default: env MAZE_HEIGHT or 13)")
    gen_parser.add_argument("--seed", default=None, help="Seed, int or string (default: env MAZE_SEED or random)")
    gen_parser.add_argument("--template", default=None, help="Level text file stamped into the center")
    gen_parser.add_argument(
        "--max-attempts",
        dest="max_attempts",
        type=int,
        default=None,
        help="Give up after this many main path attempts (default: env MAZE_MAX_ATTEMPTS or unbounded)",
    )
    gen_parser.add_argument("--json", action="store_true", help="Print a JSON document instead of level text")
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable ANSI colors")
    gen_parser.add_argument("--metrics", action="store_true", help="Print generation metrics after the maze")
    gen_parser.set_defaults(command="generate")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the maze HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask maze API",
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

    # If no subcommand provided, default to generate (after any top-level options)
    argv = list(argv)
    pos = 0
    while pos < len(argv) and argv[pos].startswith(("--env-file", "--log-level")):
        pos += 1 if "=" in argv[pos] else 2
    if pos >= len(argv) or argv[pos] not in ("generate", "server", "-h", "--help", "--version"):
        argv.insert(min(pos, len(argv)), "generate")

    args = parser.parse_args(argv)
    return args


# Level text character -> color. Anything missing prints uncolored.
_CHAR_COLORS = {
    "#": Fore.WHITE + Style.DIM,
    "R": Fore.RED + Style.BRIGHT,
    "r": Fore.RED,
    "Y": Fore.YELLOW + Style.BRIGHT,
    "y": Fore.YELLOW,
    "G": Fore.GREEN + Style.BRIGHT,
    "g": Fore.GREEN,
    "L": Fore.BLUE + Style.BRIGHT,
    "l": Fore.BLUE,
    "t": Fore.MAGENTA + Style.BRIGHT,
    "T": Fore.MAGENTA,
    "/": Fore.MAGENTA,
    "A": Fore.CYAN + Style.BRIGHT,
    "B": Fore.CYAN + Style.BRIGHT,
    "C": Fore.CYAN + Style.BRIGHT,
    "a": Fore.CYAN,
    "b": Fore.CYAN,
    "c": Fore.CYAN,
    ":": Fore.CYAN,
    "*": Fore.YELLOW,
    "d": Fore.RED + Style.DIM,
    "S": Fore.GREEN + Style.BRIGHT,
    "P": Fore.WHITE + Style.BRIGHT,
}


def colorize(text: str) -> str:
    return "".join(
        f"{_CHAR_COLORS[ch]}{ch}{Style.RESET_ALL}" if ch in _CHAR_COLORS else ch for ch in text
    )


def run_generate(args: argparse.Namespace) -> int:
    from labyrinth.logging_utils import log
    from labyrinth.maze import (
        GenerationError,
        MazeConfig,
        MazeGenerator,
        coerce_seed,
        default_template,
        load_template,
        maze_to_string,
    )

    try:
        cfg = MazeConfig.from_env(
            width=args.width,
            height=args.height,
            max_attempts=args.max_attempts,
            seed=coerce_seed(args.seed) if args.seed is not None else None,
        )
        if cfg.seed is None:
            cfg.seed = coerce_seed(None)
        template = load_template(args.template) if args.template else default_template()
        generator = MazeGenerator(cfg.width, cfg.height, template, cfg)
        grid = generator.generate_maze()
    except FileNotFoundError:
        print(f"[ERROR] Template not found: {args.template}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2
    except GenerationError as exc:
        log.error(event="generate_failed", seed=cfg.seed, error=str(exc))
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    text = maze_to_string(grid)
    if args.json:
        doc = {
            "seed": generator.seed,
            "width": generator.width,
            "height": generator.height,
            "rows": text.split("\n"),
        }
        if args.metrics:
            doc["metrics"] = generator.metrics
        print(json.dumps(doc))
        return 0

    color = _colors_enabled(args.no_color)
    if color:
        _color_init()
    print(colorize(text) if color else text)
    if args.metrics:
        print(f"seed={generator.seed}")
        for key, val in generator.metrics.items():
            if isinstance(val, dict):
                val = ",".join(f"{k}:{v}" for k, v in val.items())
            print(f"{key}={val}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested; otherwise load a default .env if present (no error if missing)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    # Imported after .env so LABYRINTH_LOG_* from the file apply
    from labyrinth.logging_utils import set_level

    if getattr(args, "log_level", None):
        set_level(args.log_level)

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return run_generate(args)

    # Import server entrypoints only after environment is ready
    from labyrinth.logging_utils import log
    from labyrinth.server import start_server

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    color = _colors_enabled(False)
    if color:
        _color_init()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    title = f"{Fore.CYAN}{Style.BRIGHT}Labyrinth Maze API{Style.RESET_ALL}" if color else "Labyrinth Maze API"
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
