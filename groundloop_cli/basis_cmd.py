"""Basis command: print the 8-fold basis and category mapping."""
import math

import click

from .output import table


@click.command()
def basis():
    """Show the 8 basis directions and which category owns each."""
    from groundloop.geometry import BASIS_VECTORS, CATEGORY_BASIS, reference_alignment

    owners = {index: category.value for category, index in CATEGORY_BASIS.items()}
    rows = []
    for n, v in enumerate(BASIS_VECTORS):
        rows.append([
            str(n),
            owners.get(n, "-"),
            f"{math.degrees(v.angle) % 360:.0f}",
            f"({v.x:+.3f}, {v.y:+.3f})",
            f"{reference_alignment(v):.3f}",
        ])
    table(["n", "category", "deg", "vector", "alignment"], rows)
