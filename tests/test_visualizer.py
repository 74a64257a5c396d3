import matplotlib.pyplot as plt
from dataclasses import replace

from etruck_tco.calculator import compute_tco, generate_amortization
from etruck_tco.sensitivity import analyze_sensitivity
from etruck_tco.visualizer import TCOVisualizer


def test_plot_amortization_marks_break_even(default_inputs, default_results):
    points = generate_amortization(default_inputs, default_results)
    fig = TCOVisualizer.plot_amortization(points, default_results, show=False)
    ax = fig.axes[0]
    assert len(ax.get_lines()) == 3
    assert any('Break-even' in t.get_text() for t in ax.texts)
    plt.close(fig)


def test_plot_amortization_without_break_even(default_inputs):
    inputs = replace(default_inputs, electricity_price=10.0, depot_charging_share=1.0)
    results = compute_tco(inputs)
    fig = TCOVisualizer.plot_amortization(generate_amortization(inputs, results), results, show=False)
    assert len(fig.axes[0].get_lines()) == 2
    plt.close(fig)


def test_plot_tornado(default_inputs, default_results):
    rows = analyze_sensitivity(default_inputs)
    fig = TCOVisualizer.plot_tornado(rows, default_results.fleet.electric_tco, show=False)
    ax = fig.axes[0]
    assert len(ax.patches) == 2 * len(rows)
    labels = [t.get_text() for t in ax.get_yticklabels()]
    # Most influential parameter on top
    assert labels[-1].startswith(rows[0].label)
    plt.close(fig)


def test_plot_annual_costs(default_results):
    fig = TCOVisualizer.plot_annual_costs(default_results, show=False)
    assert len(fig.axes[0].patches) == 12
    plt.close(fig)
