"""Run command: simulate decision cycles against a seeded stimulus source."""
import logging
import random
import sys

import click

from .output import error_box, progress_bar, success_box

logger = logging.getLogger("groundloop.cli")


def random_paths(rng: random.Random, n: int) -> list:
    """n candidate paths near random basis directions."""
    from groundloop.geometry import Category, category_direction
    from groundloop.quantum import create_path

    categories = list(Category)
    paths = []
    for i in range(n):
        category = rng.choice(categories)
        direction = category_direction(category).rotate(rng.gauss(0.0, 0.2))
        paths.append(create_path(
            f"path_{i}",
            category,
            direction.scale(rng.uniform(0.2, 1.0)),
            confidence=rng.uniform(0.3, 1.0),
            saliency=rng.random(),
            relevance=rng.random(),
        ))
    return paths


@click.command()
@click.option("--cycles", default=50, help="Number of cycles to run")
@click.option("--paths", "n_paths", default=4, help="Candidate paths per cycle")
@click.option("--seed", default=0, help="Seed for the stimulus generator")
@click.option("--reference-weight", default=0.5, help="Born-rule tilt toward the reference")
def run(cycles: int, n_paths: int, seed: int, reference_weight: float):
    """Simulate CYCLES decision cycles and summarize what was learned."""
    from groundloop.core.receipt import StopRule
    from groundloop.cycle import CycleState, run_cycle

    rng = random.Random(seed)
    state = CycleState()
    initial_bias = state.learning.demon_bias
    try:
        for _ in range(cycles):
            result = run_cycle(random_paths(rng, n_paths), state, rng.random(), reference_weight=reference_weight)
            if result.learning is not None:
                logger.info("cycle %d learned, bias %.4f", result.cycle, result.learning.new_bias)
    except StopRule as e:
        error_box("Run: STOPPED", str(e), "ground run --paths 4")
        sys.exit(2)

    stats = state.history.stats()
    snapshot = state.learning.snapshot()
    best = snapshot["best_category"] or "-"
    verification = stats["verification_rate"]
    success_box("Run: COMPLETE", [
        ("Cycles", str(state.cycle_count)),
        ("Verified", f"{progress_bar(verification)} {verification * 100:.1f}%"),
        ("Avg confidence", f"{stats['average_confidence']:.4f}"),
        ("Avg grounding cost", f"{stats['average_grounding_cost']:.4f}"),
        ("Bias", f"{initial_bias:.4f} -> {snapshot['current_bias']:.4f}"),
        ("Entropy reduced", f"{state.demon.cumulative_entropy_reduced:.4f}"),
        ("Information cost", f"{state.demon.cumulative_information_cost:.4f}"),
        ("Reference advantage", f"{snapshot['reference_advantage']:+.4f}"),
        ("Best category", best),
    ])
