"""Command-line front end.

Run:
  lsystem-engine run grammar.json --iterations 4
  lsystem-engine validate grammar.json
  lsystem-engine demo parametric --iterations 3
  lsystem-engine --help
"""

from __future__ import annotations

import argparse
import logging
import random
import sys

from .config import load_json, parse_config
from .errors import ConfigError
from .grammars import DEMOS
from .lsystem import LSystem
from .turtle import TurtleState

logger = logging.getLogger(__name__)

HELP_EPILOG = r"""
GRAMMAR JSON SYNTAX (run, validate)

  name: string (optional)
      A human-readable title.

  axiom: string (required)
      The initial word. Every non-space character is a symbol; "X[...]"
      makes the bracketed word the branch of X. A symbol owns at most one
      branch.

  iterations: integer >= 0 (default 0)
      Number of rewriting steps; --iterations overrides it.

  seed: integer (optional)
      Seed for the probability draws; --seed overrides it.

  productions: array (optional), tried in order; the first one that matches
  a symbol rewrites it, symbols without a match are kept.

      { "predecessor": "B", "successor": "B[A]",
        "left": "A", "right": "A", "probability": 0.5 }

      predecessor / left / right: single characters. left and right are
          optional; when given, the neighbour on that side (same branch
          level) must be that symbol.
      successor: word replacing the symbol (may be empty). When the
          rewritten symbol had a branch, the branch moves to the last
          symbol of the successor unless that symbol has its own.
      probability: number in [0, 1] (optional). One draw per attempt; the
          production applies when the draw is <= probability.

Example (algae):

    {
      "axiom": "A",
      "iterations": 4,
      "productions": [
        {"predecessor": "A", "successor": "AB"},
        {"predecessor": "B", "successor": "A"}
      ]
    }
"""


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lsystem-engine",
        description="Context-sensitive, stochastic L-system rewriting.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )
    p.add_argument(
        "-v", "--verbose", action="store_true", help="Log every generation step."
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser(
        "run",
        help="Derive a grammar JSON file and print every generation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pr.add_argument("config", help="Path to the grammar JSON file.")
    pr.add_argument(
        "--iterations", type=int, default=None, help="Override the step count."
    )
    pr.add_argument("--seed", type=int, default=None, help="Override the seed.")

    pv = sub.add_parser(
        "validate",
        help="Validate a grammar JSON file and print a brief summary.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pv.add_argument("config", help="Path to the grammar JSON file.")

    pd = sub.add_parser(
        "demo",
        help="Run one of the built-in grammars.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pd.add_argument("name", choices=sorted(DEMOS), help="Built-in grammar to run.")
    pd.add_argument("--iterations", type=int, default=3, help="Number of steps.")
    pd.add_argument(
        "--seed", type=int, default=None, help="Seed for repeatable randomness."
    )

    return p


def _print_generations(lsys: LSystem, iterations: int, *, turtle: bool) -> None:
    def show() -> None:
        state = TurtleState() if turtle else None
        derivation = lsys.get_current_derivation(state)
        print(f"{lsys.step_count}: {derivation.render()}")

    show()
    for _ in range(iterations):
        lsys.run_production()
        show()


# -------------------------
# Commands
# -------------------------


def cmd_run(config_path: str, iterations: int | None, seed: int | None) -> None:
    cfg = parse_config(load_json(config_path))
    if iterations is None:
        iterations = cfg.iterations
    if iterations < 0:
        raise ConfigError("--iterations must be >= 0")
    rng = random.Random(seed if seed is not None else cfg.seed)
    logger.info("running %r for %d iterations", cfg.name, iterations)
    _print_generations(cfg.build(rng), iterations, turtle=False)


def cmd_validate(config_path: str) -> None:
    cfg = parse_config(load_json(config_path))

    print(f"name: {cfg.name}")
    print(f"axiom: {cfg.axiom}")
    print(f"iterations: {cfg.iterations}")
    print(f"seed: {cfg.seed}")
    print(f"symbols: {''.join(sorted(cfg.symbols()))}")
    print(f"productions: {len(cfg.productions)}")
    for i, p in enumerate(cfg.productions):
        print(f"  {i}: {p.describe()}")

    # Building catches problems that only show once the symbols are bound.
    cfg.build()


def cmd_demo(name: str, iterations: int, seed: int | None) -> None:
    if iterations < 0:
        raise ConfigError("--iterations must be >= 0")
    axiom, productions = DEMOS[name]()
    lsys = LSystem(axiom, productions, random.Random(seed))
    _print_generations(lsys, iterations, turtle=name == "parametric")


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "run":
            cmd_run(args.config, args.iterations, args.seed)
        elif args.cmd == "validate":
            cmd_validate(args.config)
        elif args.cmd == "demo":
            cmd_demo(args.name, args.iterations, args.seed)
        else:
            raise AssertionError("unreachable")
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0
