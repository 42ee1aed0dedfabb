"""
Output functions for saving simulation results.

Density snapshots are written as raw .npy arrays (interior only, index
order [x, y]) plus grayscale PNG thumbnails.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from fluidsim.fields.state import FluidFields


def save_array(data: np.ndarray, filepath: str | Path) -> Path:
    """Save an array losslessly as .npy, creating parent directories."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    np.save(filepath, data)
    return filepath


def save_thumbnail(
    data: np.ndarray,
    filepath: str | Path,
    colormap: str = "gray",
    vmin: float | None = 0.0,
    vmax: float | None = 1.0,
    title: str | None = None,
    figsize: tuple[int, int] = (6, 6),
    dpi: int = 100,
) -> Path:
    """
    Save a 2D [x, y] array as PNG thumbnail with colormap.

    Args:
        data: 2D numpy array indexed [x, y]
        filepath: Output path
        colormap: Matplotlib colormap name
        vmin: Minimum value for colormap
        vmax: Maximum value for colormap
        title: Optional title
        figsize: Figure size in inches
        dpi: Resolution
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)

    # imshow expects [row, col] = [y, x]
    im = ax.imshow(
        data.T,
        cmap=colormap,
        vmin=vmin,
        vmax=vmax,
        origin="lower",
        aspect="equal",
    )

    plt.colorbar(im, ax=ax, shrink=0.8)

    if title:
        ax.set_title(title)

    ax.set_xlabel("X [cells]")
    ax.set_ylabel("Y [cells]")

    plt.tight_layout()
    plt.savefig(filepath, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return filepath


def save_density_snapshot(
    fields: FluidFields,
    output_dir: str | Path,
    tick: int,
    prefix: str = "density",
) -> dict[str, Path]:
    """
    Save the density interior as .npy and PNG.

    Args:
        fields: FluidFields wrapper
        output_dir: Output directory
        tick: Tick number for the filename
        prefix: Filename prefix

    Returns:
        Dictionary with "npy" and "png" output paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    density = fields.density.interior().astype(np.float32)
    stem = f"{prefix}_{tick:06d}"

    return {
        "npy": save_array(density, output_dir / f"{stem}.npy"),
        "png": save_thumbnail(density, output_dir / f"{stem}.png", title=f"Density (tick {tick})"),
    }
