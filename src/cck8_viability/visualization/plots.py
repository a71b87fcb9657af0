"""
Bar chart of treatment viability relative to control.
"""

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from cck8_viability.assessment.viability import ViabilityResult
from cck8_viability.constants import (
    BAR_EDGE_COLOR,
    CONTROL_COLOR,
    CONTROL_GROUP,
    TREATMENT_COLOR,
    VIABILITY_DECIMALS,
)
from cck8_viability.utils.labels import format_percent


def plot_viability_bar(
    results: Sequence[ViabilityResult],
    *,
    control_label: str = CONTROL_GROUP,
    show_values: bool = True,
    title: Optional[str] = None,
    figsize: tuple[float, float] = (8, 5),
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """
    Plot viability (%) per treatment as a bar chart.

    The control bar is drawn in blue, all other treatments in green. Bars keep
    the order of ``results``. Non-finite viabilities (control equal to blank)
    are drawn with zero height and labelled with their value.

    Args:
        results: Output of compute_viability.
        control_label: Treatment drawn in the control color.
        show_values: If True, annotate each bar with its percentage.
        title: Optional plot title.
        figsize: Figure size in inches.
        ax: Optional axes to draw on.

    Returns:
        matplotlib Figure.
    """
    if not results:
        raise ValueError("No viability results to plot.")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    df = pd.DataFrame(
        {
            "treatment": [r.treatment for r in results],
            "viability": [r.viability for r in results],
        }
    )
    finite = np.isfinite(df["viability"].astype(float))
    df["bar_height"] = df["viability"].where(finite, 0.0)
    order = df["treatment"].tolist()
    palette = {
        t: CONTROL_COLOR if t == control_label else TREATMENT_COLOR for t in order
    }

    sns.barplot(
        data=df,
        x="treatment",
        y="bar_height",
        hue="treatment",
        order=order,
        hue_order=order,
        palette=palette,
        saturation=1,
        edgecolor=BAR_EDGE_COLOR,
        linewidth=1,
        errorbar=None,
        legend=False,
        ax=ax,
    )

    if show_values:
        for i, row in df.iterrows():
            ax.annotate(
                format_percent(row["viability"], VIABILITY_DECIMALS),
                xy=(i, row["bar_height"]),
                xytext=(0, 3),
                textcoords="offset points",
                ha="center",
                va="bottom",
                fontsize=8,
            )

    if df["bar_height"].min() >= 0:
        ax.set_ylim(bottom=0)
    ax.set_ylabel("Cell viability (%)")
    ax.set_xlabel("")
    ax.set_title(title or "CCK-8 Cell Viability", pad=12, fontsize=12, fontweight="bold")
    if len(order) > 6:
        ax.tick_params(axis="x", labelrotation=45)

    sns.despine(ax=ax)
    fig.tight_layout()
    return fig
