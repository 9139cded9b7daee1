from types import SimpleNamespace

from nurse_funnel.core.statistics import filter_by_plan_titles, stats_by_plan, total_stats


def reg(plan_title: str, total_price: float = 0):
    return SimpleNamespace(plan_title=plan_title, total_price=total_price)


def test_empty_statistics():
    stats = total_stats([])
    assert stats.total_registrations == 0
    assert stats.total_revenue == 0
    assert stats.average_revenue == 0
    assert stats.most_popular_plan == "N/A"
    assert stats_by_plan([]) == []


def test_stats_by_plan_keeps_first_seen_order():
    plan_stats = stats_by_plan([reg("B"), reg("A"), reg("B")])

    assert [s.name for s in plan_stats] == ["B", "A"]
    assert [s.count for s in plan_stats] == [2, 1]
    assert [s.percentage for s in plan_stats] == ["66.7", "33.3"]


def test_most_popular_tie_goes_to_first_seen():
    stats = total_stats([reg("A"), reg("B"), reg("B"), reg("A")])
    assert stats.most_popular_plan == "A"


def test_totals_and_average():
    stats = total_stats([reg("A", 1000), reg("B", 500), reg("B", 0)])
    assert stats.total_registrations == 3
    assert stats.total_revenue == 1500
    assert stats.average_revenue == 500
    assert stats.most_popular_plan == "B"


def test_blank_plan_title_is_reported_as_na():
    assert total_stats([reg("")]).most_popular_plan == "N/A"


def test_filter_by_plan_titles():
    rows = [reg("A"), reg("B"), reg("C")]

    assert filter_by_plan_titles(rows, []) == rows
    assert [r.plan_title for r in filter_by_plan_titles(rows, ["A", "C"])] == ["A", "C"]
    assert filter_by_plan_titles(rows, ["Z"]) == []
