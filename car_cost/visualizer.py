"""
Visualization module for cost of ownership results.
"""

import matplotlib.pyplot as plt
from .models import YearlyBreakdown

COST_COLUMNS = ['Loan Payment', 'Insurance', 'Maintenance', 'Permit']


class CostVisualizer:
    """Create visualizations for cost of ownership projections."""

    @staticmethod
    def plot_overview(breakdown: YearlyBreakdown, show: bool = True) -> plt.Figure:
        """
        Create cost of ownership overview.

        Args:
            breakdown: YearlyBreakdown from a projection
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        settings = breakdown.settings
        df = breakdown.to_dataframe()

        fig, axes = plt.subplots(2, 2, figsize=(14, 10))
        fig.suptitle(f"Cost of Ownership: {settings.name}", fontsize=16, fontweight='bold')

        # 1. Cumulative cost over time
        ax = axes[0, 0]
        ax.plot(df['Year'], df['Cumulative Cost'], marker='o', linewidth=2)
        if 0 < settings.loan_years < breakdown.years:
            ax.axvline(x=settings.loan_years, color='green', linestyle='--', alpha=0.5)
            ax.text(settings.loan_years, 0, f'Loan paid off\nYear {settings.loan_years}',
                    ha='center', fontsize=10)
        ax.set_xlabel('Year')
        ax.set_ylabel('Cumulative Cost ($)')
        ax.set_title('Cumulative Cost Over Time')
        ax.grid(True, alpha=0.3)
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: f'${x/1e3:.0f}k'))

        # 2. Yearly cost by category
        CostVisualizer._stacked_bars(axes[0, 1], breakdown)

        # 3. Lifetime share by category
        ax = axes[1, 0]
        totals = df[COST_COLUMNS].sum()
        if breakdown.upfront_cost:
            totals['Upfront'] = breakdown.upfront_cost
        totals = totals[totals > 0]
        colors = plt.cm.Set3(range(len(totals)))
        ax.pie(totals, labels=totals.index, autopct='%1.1f%%', colors=colors)
        ax.set_title(f'Cost Breakdown\nTotal: ${breakdown.total:,.0f}')

        # 4. Summary
        ax = axes[1, 1]
        ax.axis('off')

        summary_text = f"""
        COST OF OWNERSHIP

        Purchase price:        ${settings.cost:>15,.0f}
        Down payment:          ${settings.down_payment:>15,.0f}
        Loan rate:             {settings.loan_rate*100:>15.2f}%
        Loan term:             {settings.loan_years:>15d} years

        Average yearly cost:   ${breakdown.average_yearly_cost:>15,.0f}
        Average monthly cost:  ${breakdown.average_monthly_cost:>15,.0f}
        Total lifetime cost:   ${breakdown.total:>15,.0f}
        Expected lifetime:     {breakdown.years:>15d} years
        """

        ax.text(0.1, 0.5, summary_text, fontsize=11, family='monospace',
                verticalalignment='center', bbox=dict(boxstyle='round',
                facecolor='wheat', alpha=0.5))

        plt.tight_layout()
        if show:
            plt.show()

        return fig

    @staticmethod
    def plot_yearly_costs(breakdown: YearlyBreakdown, show: bool = True) -> plt.Figure:
        """
        Plot yearly cost breakdown by category.

        Args:
            breakdown: YearlyBreakdown from a projection
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=(10, 6))
        CostVisualizer._stacked_bars(ax, breakdown)

        plt.tight_layout()
        if show:
            plt.show()

        return fig

    @staticmethod
    def _stacked_bars(ax, breakdown: YearlyBreakdown):
        df = breakdown.to_dataframe().set_index('Year')
        df[COST_COLUMNS].plot(kind='bar', ax=ax, stacked=True)
        ax.set_title(f'{breakdown.settings.name} - Yearly Costs')
        ax.set_ylabel('Cost ($)')
        ax.set_xlabel('Year')
        ax.legend(loc='upper right', fontsize=9)
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: f'${x/1e3:.0f}k'))
