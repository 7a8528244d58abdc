"""Collapse command: build a superposition from angles and measure it once."""
import math
import sys

import click

from .output import error_box, success_box


@click.command()
@click.argument("angles", nargs=-1, type=float, required=True)
@click.option("--magnitude", default=1.0, help="Magnitude of every path")
@click.option("--draw", default=0.5, help="Uniform draw in [0, 1)")
@click.option("--reference-weight", default=0.5, help="Born-rule tilt toward the reference")
@click.option("--demon/--no-demon", default=True, help="Reweight toward the reference first")
@click.option("--bias", default=1.0, help="Demon bias strength")
def collapse(angles, magnitude: float, draw: float, reference_weight: float, demon: bool, bias: float):
    """Collapse paths given as ANGLES in degrees."""
    from groundloop.core.receipt import StopRule
    from groundloop.geometry import CATEGORY_BASIS, Vector2, nearest_basis_index
    from groundloop.measure import MeasurementConfig, measure
    from groundloop.quantum import build_superposition, create_path

    by_index = {index: category for category, index in CATEGORY_BASIS.items()}
    try:
        paths = []
        for i, deg in enumerate(angles):
            amplitude = Vector2.from_polar(magnitude, math.radians(deg))
            category = by_index[nearest_basis_index(amplitude)]
            paths.append(create_path(f"path_{i}", category, amplitude))

        sup = build_superposition(paths)
        config = MeasurementConfig(use_demon=demon, demon_bias=bias, reference_weight=reference_weight)
        event = measure(sup, draw, config)
    except StopRule as e:
        error_box("Collapse: REJECTED", str(e), "ground collapse 135 45 --draw 0.3")
        sys.exit(2)

    grounded = event.grounded_amplitude
    success_box(f"Collapse: {'VERIFIED' if event.verified else 'UNVERIFIED'}", [
        ("Selected", f"{event.selected_path.id} ({event.selected_path.category.value})"),
        ("Probability", f"{event.probability:.4f}"),
        ("Grounded", f"({grounded.x:+.4f}, {grounded.y:+.4f})"),
        ("Grounding cost", f"{event.grounding_cost:.4f}"),
        ("Score", f"{event.verification_score:.4f}"),
        ("Uncertainty", f"{event.uncertainty:.4f}"),
        ("Coherence", f"{sup.coherence:.4f}"),
    ], "ground run --cycles 50")
    sys.exit(0 if event.verified else 1)
