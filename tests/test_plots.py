import math

import matplotlib.pyplot as plt
import pytest
from matplotlib.colors import to_hex

from cck8_viability.assessment.viability import compute_viability
from cck8_viability.constants import CONTROL_COLOR, TREATMENT_COLOR
from cck8_viability.visualization.plots import plot_viability_bar


def test_bar_per_treatment_with_control_color(example_readings):
    results = compute_viability(example_readings)
    fig = plot_viability_bar(results)
    ax = fig.axes[0]

    assert isinstance(fig, plt.Figure)
    assert len(ax.patches) == len(results)
    colors = [to_hex(p.get_facecolor()) for p in ax.patches]
    assert colors == [CONTROL_COLOR, TREATMENT_COLOR]
    heights = [p.get_height() for p in ax.patches]
    assert heights[0] == pytest.approx(100.0)
    assert ax.get_ylabel() == "Cell viability (%)"


def test_non_finite_viability_is_drawn_flat(make_readings):
    readings = make_readings([("Blank", 0.5), ("Control", 0.5), ("Drug", 0.3)])
    results = compute_viability(readings)
    assert math.isinf(results[1].viability)

    fig = plot_viability_bar(results)
    ax = fig.axes[0]
    assert ax.patches[1].get_height() == 0
    assert "-inf%" in [t.get_text() for t in ax.texts]


def test_draws_on_given_axes(example_readings):
    fig, ax = plt.subplots()
    out = plot_viability_bar(compute_viability(example_readings), ax=ax, show_values=False)
    assert out is fig
    assert not ax.texts


def test_empty_results_raise():
    with pytest.raises(ValueError):
        plot_viability_bar([])
