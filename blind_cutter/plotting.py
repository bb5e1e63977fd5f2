# blind_cutter/plotting.py
# Minimal matplotlib visualization: draw all sheets of a packing job in one figure.
# Operator check of a cutting plan; worksheets (CSV/PDF) are rendered elsewhere.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .types import PackResult, Sheet


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_dims: bool = True
    show_free_rects: bool = False
    show_grid: bool = False
    font_size: int = 7
    padding_mm: int = 50  # empty margin around each sheet in drawing units
    max_cols: int = 4     # sheets are long and narrow; several fit side by side


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    # map to [0.3..0.9] range for readability
    r = 0.3 + ((h >> 0) & 0xFF) / 255 * 0.6
    g = 0.3 + ((h >> 8) & 0xFF) / 255 * 0.6
    b = 0.3 + ((h >> 16) & 0xFF) / 255 * 0.6
    return (r, g, b)


def _sheet_title(sheet: Sheet) -> str:
    return f"Sheet {sheet.sheet_id} | {sheet.stock_width}×{sheet.stock_length} | {sheet.efficiency}%"


def plot_pack_result(
    res: PackResult,
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """
    Draw all sheets in one matplotlib figure.
    y grows down the roll (origin top-left), so the y axis is inverted.
    """
    style = style or PlotStyle()

    n = len(res.sheets)
    if n == 0:
        raise ValueError("Pack result has no sheets to plot")

    cols = min(style.max_cols, n)
    rows = (n + cols - 1) // cols

    if figsize is None:
        figsize = (3.5 * cols, 8 * rows)

    fig, axes = plt.subplots(rows, cols, figsize=figsize, squeeze=False)
    ax_list: List[plt.Axes] = list(axes.ravel())

    for ax in ax_list[n:]:
        ax.axis("off")

    for idx, sheet in enumerate(res.sheets):
        ax = ax_list[idx]
        W, L = sheet.stock_width, sheet.stock_length

        ax.add_patch(Rectangle((0, 0), W, L, fill=False, linewidth=1.2))

        if style.show_free_rects:
            for r in sheet.free_rects:
                ax.add_patch(
                    Rectangle((r.x, r.y), r.width, r.length, fill=False, linewidth=0.5, linestyle=":")
                )

        for pl in sheet.placements:
            color = _hash_color(pl.label)
            ax.add_patch(
                Rectangle((pl.x, pl.y), pl.width, pl.length, facecolor=color, edgecolor="black", linewidth=0.8)
            )

            if style.show_labels or style.show_dims:
                lines: List[str] = []
                if style.show_labels:
                    lines.append(pl.label)
                if style.show_dims:
                    lines.append(f"{pl.width}×{pl.length}" + (" R" if pl.rotated else ""))
                ax.text(
                    pl.x + pl.width / 2,
                    pl.y + pl.length / 2,
                    "\n".join(lines),
                    ha="center",
                    va="center",
                    fontsize=style.font_size,
                    color="black",
                )

        ax.set_title(_sheet_title(sheet), fontsize=9)
        ax.set_aspect("equal", adjustable="box")

        pad = style.padding_mm
        ax.set_xlim(-pad, W + pad)
        ax.set_ylim(L + pad, -pad)

        if style.show_grid:
            ax.grid(True, linewidth=0.3)
        else:
            ax.grid(False)
        ax.tick_params(labelbottom=False, labelleft=False, bottom=False, left=False)

    fig.tight_layout()
    return fig


def save_pack_png(
    res: PackResult,
    path: str,
    style: Optional[PlotStyle] = None,
    dpi: int = 150,
) -> None:
    fig = plot_pack_result(res, style=style)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
