"""
Visualization module for TCO results.
"""

from typing import Sequence

import matplotlib.pyplot as plt

from .formatting import format_currency, format_percent
from .models import (
    AmortizationDataPoint,
    CalculationResults,
    SensitivityResult,
    amortization_to_dataframe,
)

DIESEL_COLOR = '#64748b'
ELECTRIC_COLOR = '#10b981'
INCREASE_COLOR = '#ef4444'


def _thousands(x, p):
    return f'{x/1e3:,.0f}k €'


class TCOVisualizer:
    """Create visualizations for TCO analysis."""

    @staticmethod
    def plot_amortization(points: Sequence[AmortizationDataPoint], results: CalculationResults = None,
                          show: bool = True) -> plt.Figure:
        """
        Plot cumulative fleet cost of both drivetrains over the usage period.

        Args:
            points: Amortization series
            results: If given, the break-even point is marked
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        df = amortization_to_dataframe(points)
        fig, ax = plt.subplots(figsize=(10, 6))

        ax.plot(df.index, df['Diesel'], marker='s', label='Diesel', color=DIESEL_COLOR, linewidth=2)
        ax.plot(df.index, df['Electric'], marker='o', label='Electric', color=ELECTRIC_COLOR, linewidth=2)

        if results is not None and results.has_break_even and results.break_even_years <= df.index.max():
            ax.axvline(x=results.break_even_years, color='green', linestyle='--', alpha=0.5)
            ax.text(results.break_even_years, ax.get_ylim()[0],
                    f'Break-even\n{results.break_even_years:.1f} years', ha='center', fontsize=10)

        ax.set_xticks(list(df.index))
        ax.set_xticklabels(df['Label'], rotation=45)
        ax.set_ylabel('Cumulative Cost (€)')
        ax.set_title('Cumulative Fleet Cost')
        ax.legend()
        ax.grid(True, alpha=0.3)
        ax.yaxis.set_major_formatter(plt.FuncFormatter(_thousands))

        plt.tight_layout()
        if show:
            plt.show()

        return fig

    @staticmethod
    def plot_tornado(rows: Sequence[SensitivityResult], base_tco: float, show: bool = True) -> plt.Figure:
        """
        Tornado chart of fleet electric TCO changes around the baseline.

        Bars that raise the TCO are red, bars that lower it green. The most
        influential parameter is drawn on top.
        """
        fig, ax = plt.subplots(figsize=(10, 1 + 0.8 * max(len(rows), 1)))

        for position, row in enumerate(reversed(rows)):
            for value, tco in ((row.low_value, row.low_tco), (row.high_value, row.high_tco)):
                delta = tco - base_tco
                color = INCREASE_COLOR if delta > 0 else ELECTRIC_COLOR
                ax.barh(position, delta, left=base_tco, color=color, alpha=0.8)
                ax.text(base_tco + delta, position, f' {value:g} ', va='center',
                        ha='left' if delta >= 0 else 'right', fontsize=9)

        ax.axvline(x=base_tco, color='black', linewidth=1)
        ax.set_yticks(range(len(rows)))
        ax.set_yticklabels([f'{r.label} ({format_percent(r.impact_percent)})' for r in reversed(rows)])
        ax.set_xlabel('Fleet Electric TCO (€)')
        ax.set_title(f'Sensitivity Analysis - Baseline {format_currency(base_tco)}')
        ax.xaxis.set_major_formatter(plt.FuncFormatter(_thousands))

        plt.tight_layout()
        if show:
            plt.show()

        return fig

    @staticmethod
    def plot_annual_costs(results: CalculationResults, show: bool = True) -> plt.Figure:
        """
        Plot per-vehicle annual operating cost breakdown by category.

        Args:
            results: CalculationResults object
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        d, e = results.diesel, results.electric
        categories = ['Energy', 'Toll', 'Maintenance', 'Insurance', 'Tax', 'THG Quota']
        diesel_values = [d.energy, d.toll, d.maintenance, d.insurance, d.tax, 0.0]
        electric_values = [e.energy, e.toll, e.maintenance, e.insurance, 0.0, e.thg_quote]

        fig, ax = plt.subplots(figsize=(10, 6))
        positions = range(len(categories))
        ax.bar([p - 0.2 for p in positions], diesel_values, width=0.4, label='Diesel', color=DIESEL_COLOR)
        ax.bar([p + 0.2 for p in positions], electric_values, width=0.4, label='Electric', color=ELECTRIC_COLOR)
        ax.axhline(0, color='black', linewidth=0.8)

        ax.set_xticks(list(positions))
        ax.set_xticklabels(categories)
        ax.set_ylabel('Cost per Vehicle and Year (€)')
        ax.set_title(f'Annual Operating Costs\nDiesel: {format_currency(d.annual_total)}   '
                     f'Electric: {format_currency(e.annual_total)}')
        ax.legend()
        ax.yaxis.set_major_formatter(plt.FuncFormatter(_thousands))

        plt.tight_layout()
        if show:
            plt.show()

        return fig
