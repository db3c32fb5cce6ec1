"""
Field Visualization

Colour-map plots of density and velocity magnitude.
"""

import matplotlib.pyplot as plt
import numpy as np


def _field_figure(field, title, cmap, label):
    fig, ax = plt.subplots(figsize=(6, 4))
    im = ax.imshow(field, origin="lower", cmap=cmap, aspect="auto")
    fig.colorbar(im, ax=ax, label=label)
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    fig.tight_layout()
    return fig


def plot_density(rho, title="Density"):
    """Plot a density field of shape (ny, nx). Returns the Figure."""
    return _field_figure(rho, title, "viridis", r"$\rho$")


def plot_velocity_magnitude(ux, uy, title="Velocity Magnitude"):
    """Plot |u| for velocity fields of shape (ny, nx). Returns the Figure."""
    return _field_figure(np.sqrt(ux * ux + uy * uy), title, "plasma", "|u|")
