import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from cck8_viability.data.readings import Reading  # noqa: E402


def _make_readings(pairs):
    return [Reading(treatment, od) for treatment, od in pairs]


@pytest.fixture
def make_readings():
    return _make_readings


@pytest.fixture
def example_readings():
    return _make_readings(
        [
            ("Blank", 0.10),
            ("Blank", 0.11),
            ("Control", 0.50),
            ("Control", 0.52),
            ("Drug", 0.30),
            ("Drug", 0.31),
        ]
    )


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
