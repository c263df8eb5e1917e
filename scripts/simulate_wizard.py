#!/usr/bin/env python3
"""Simulate triage wizard sessions end-to-end, in-process.

Drives the ``WizardRunner`` through the catalog with random, scripted or
interactive answers, printing every question asked, the answer chosen and
the final recommendation.  With ``-n`` > 1 a summary table tallies the
recommendations reached across runs.

Usage::

    # Default run (sequential_memory strategy, random answers)
    python scripts/simulate_wizard.py

    # Scripted answers (y/n per question)
    python scripts/simulate_wizard.py --answers y,n,n,y,n,n,y

    # Compare strategies over 200 random sessions
    python scripts/simulate_wizard.py --strategy graph -n 200 --seed 42

    # Answer the questions yourself
    python scripts/simulate_wizard.py --interactive
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections import Counter
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure src/ is on sys.path so the script runs from a plain checkout.
# ---------------------------------------------------------------------------
_SCRIPT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(_SCRIPT_DIR.parent / "src"))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from triage_rulesets.catalog import load_catalog  # noqa: E402
from triage_rulesets.display import ResultCopyRenderer  # noqa: E402
from triage_rulesets.engine import DecisionEngine  # noqa: E402
from triage_rulesets.models.session import Notification  # noqa: E402
from triage_rulesets.models.strategy import StrategyName  # noqa: E402
from triage_rulesets.runner import WizardRunner  # noqa: E402

console = Console()

_YES = {"y", "yes", "s", "si", "sí", "1", "true"}
_NO = {"n", "no", "0", "false"}


def parse_answer(token: str) -> bool:
    """Map a y/n style token to a boolean answer."""
    t = token.strip().lower()
    if t in _YES:
        return True
    if t in _NO:
        return False
    raise argparse.ArgumentTypeError(f"not a yes/no answer: {token!r}")


def parse_answers(raw: str) -> list[bool]:
    return [parse_answer(tok) for tok in raw.split(",") if tok.strip()]


# ---------------------------------------------------------------------------
# Single session
# ---------------------------------------------------------------------------


def run_session(
    engine: DecisionEngine,
    renderer: ResultCopyRenderer,
    strategy: str,
    *,
    rng: random.Random,
    scripted: list[bool] | None = None,
    interactive: bool = False,
    quiet: bool = False,
) -> str | None:
    """Run one session to completion and return the recommendation id.

    Returns None if scripted answers run out before the session ends.
    """

    def on_result(notification: Notification) -> None:
        if not quiet:
            console.print(f"  [green]✓[/] {renderer.render_notification(notification)}")

    runner = WizardRunner(engine, strategy, on_result=on_result)
    pending = list(scripted) if scripted is not None else None

    while runner.result is None:
        step = runner.step()
        if not quiet:
            console.print()
            console.print(renderer.render_step(step))

        if interactive:
            raw = console.input("  [bold]>[/] ")
            if raw.strip().lower() in ("r", "reset"):
                runner.reset()
                continue
            try:
                answer = parse_answer(raw)
            except argparse.ArgumentTypeError as exc:
                console.print(f"  [yellow]![/] {exc}")
                continue
        elif pending is not None:
            if not pending:
                console.print("  [yellow]![/] ran out of scripted answers")
                return None
            answer = pending.pop(0)
        else:
            answer = rng.random() < 0.5

        if not quiet:
            console.print(f"  [dim]A:[/] {'Sí' if answer else 'No'}")
        runner.answer(answer)

    if not quiet:
        console.print()
        console.print(renderer.render_step(runner.step()))
    return runner.result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate triage wizard sessions in-process.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in StrategyName],
        default=StrategyName.SEQUENTIAL_MEMORY.value,
        help="Decision strategy (default: sequential_memory)",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Catalog YAML (default: packaged rules/catalog.yaml)",
    )
    parser.add_argument(
        "--answers",
        type=parse_answers,
        default=None,
        help="Comma-separated scripted answers, e.g. y,n,n,y",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for each answer (y/n, r to reset)",
    )
    parser.add_argument(
        "-n", "--runs",
        type=int,
        default=1,
        help="Number of random sessions to run (default: 1)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed for reproducible random runs",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable DEBUG logging from the engine",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    catalog = load_catalog(args.catalog)
    engine = DecisionEngine(catalog)
    renderer = ResultCopyRenderer(catalog)

    seed = args.seed if args.seed is not None else random.randrange(2**32)
    rng = random.Random(seed)

    if args.runs <= 1 or args.answers is not None or args.interactive:
        result = run_session(
            engine, renderer, args.strategy,
            rng=rng, scripted=args.answers, interactive=args.interactive,
        )
        sys.exit(0 if result is not None else 1)

    console.print(f"[dim]RNG seed: {seed}[/]")
    counts: Counter[str] = Counter()
    for _ in range(args.runs):
        result = run_session(engine, renderer, args.strategy, rng=rng, quiet=True)
        counts[result] += 1

    table = Table(title=f"Recommendations over {args.runs} runs ({args.strategy})")
    table.add_column("Recommendation", min_width=20)
    table.add_column("Runs", justify="right")
    table.add_column("Share", justify="right")
    for rec in catalog.recommendations:
        n = counts.get(rec.id, 0)
        table.add_row(rec.label, str(n), f"{100 * n / args.runs:.1f}%")
    console.print(table)


if __name__ == "__main__":
    main()
