import pytest

from nurse_funnel.api.charts import monthly_revenue_chart, plan_distribution_chart
from nurse_funnel.core.models import MonthlyProjection
from nurse_funnel.core.statistics import PlanStat


def test_monthly_revenue_chart_fragment():
    rows = [
        MonthlyProjection(month=1, active_count=1, dropped_count=1, active_revenue=500, dropped_revenue=420, total_revenue=920),
        MonthlyProjection(month=2, active_count=1, dropped_count=0, active_revenue=500, dropped_revenue=0, total_revenue=500),
    ]
    html = monthly_revenue_chart(rows, include_plotlyjs=False)

    assert "<html" not in html
    assert "Activos" in html
    assert "Abandonos" in html
    assert "M1" in html
    assert "1 personas - 500" in html


def test_plan_distribution_chart_kinds():
    stats = [PlanStat("Plan A", 1, "50.0"), PlanStat("Plan B", 1, "50.0")]

    bar = plan_distribution_chart(stats, kind="bar", include_plotlyjs=False)
    assert "Plan A" in bar

    pie = plan_distribution_chart(stats, kind="pie", include_plotlyjs=False)
    assert "Plan A: 50.0%" in pie

    with pytest.raises(ValueError):
        plan_distribution_chart(stats, kind="donut")
