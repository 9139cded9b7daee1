"""
Testes da projeção de receita por coortes.
"""
from datetime import datetime

import pytest

from nurse_funnel.core.models import RegistrationRecord
from nurse_funnel.core.projection import (
    ABANDONMENT_COST_PER_MONTH,
    assign_dropout_months,
    dropout_month_for_rank,
    project_monthly_revenue,
    split_cohorts,
    summarize_projection,
)


def make_record(index: int, monthly_payment: float = 500, amortization_months: int = 10) -> RegistrationRecord:
    return RegistrationRecord(
        id=f"reg-{index}",
        created_at=datetime(2025, 1, 1),
        name=f"Persona {index}",
        email=f"persona{index}@example.com",
        plan_id="inversion-compartida-aurora",
        plan_title="Inversión Compartida - Modalidad Aurora",
        monthly_payment=monthly_payment,
        amortization_months=amortization_months,
    )


def test_split_cohorts_by_position():
    records = [make_record(i) for i in range(7)]
    active, dropped = split_cohorts(records)

    assert [r.id for r in active] == ["reg-0", "reg-1", "reg-2", "reg-3"]
    assert [r.id for r in dropped] == ["reg-4", "reg-5", "reg-6"]


def test_split_cohorts_single_record_is_active():
    active, dropped = split_cohorts([make_record(0)])
    assert len(active) == 1
    assert dropped == []


def test_dropout_month_for_rank():
    # 10 abandonos: rank = índice / 10
    assert dropout_month_for_rank(0 / 10) == 1
    assert dropout_month_for_rank(3 / 10) == 2
    assert dropout_month_for_rank(9 / 10) == 6


def test_dropout_month_defaults_to_first_month():
    assert dropout_month_for_rank(1.5) == 1


def test_assign_dropout_months_covers_window():
    months = assign_dropout_months([make_record(i) for i in range(10)])
    assert len(months) == 10
    assert months[:3] == [1, 1, 1]
    assert months[-1] == 6
    assert all(1 <= m <= 6 for m in months)


def test_projection_end_to_end_two_records():
    rows = project_monthly_revenue([make_record(0), make_record(1)])

    assert len(rows) == 12
    # ativo paga 500€ nos meses 1-10, abandono paga 420€ nos meses 1-6
    assert rows[0].total_revenue == 920
    assert rows[0].active_count == 1
    assert rows[0].dropped_count == 1
    assert rows[6].total_revenue == 500
    assert rows[6].dropped_revenue == 0
    assert rows[10].total_revenue == 0
    assert rows[10].active_count == 0


def test_dropped_revenue_stops_after_month_six():
    records = [make_record(i) for i in range(20)]
    rows = project_monthly_revenue(records)

    assert rows[0].dropped_count == 3
    # quem abandona no mês 6 ainda não conta no mês 5
    assert rows[4].dropped_count == 9
    assert rows[5].dropped_count == 10
    assert rows[5].dropped_revenue == 10 * ABANDONMENT_COST_PER_MONTH
    for row in rows[6:]:
        assert row.dropped_count == 0
        assert row.dropped_revenue == 0


def test_zero_amortization_never_contributes():
    rows = project_monthly_revenue([make_record(0, monthly_payment=1325, amortization_months=0)])
    assert all(row.active_revenue == 0 for row in rows)
    assert all(row.active_count == 0 for row in rows)


def test_empty_projection():
    assert project_monthly_revenue([]) == []

    summary = summarize_projection([])
    assert summary.total_revenue == 0
    assert summary.average_monthly_revenue == 0


def test_summarize_projection():
    rows = project_monthly_revenue([make_record(0), make_record(1)])
    summary = summarize_projection(rows)

    assert summary.total_revenue == 10 * 500 + 6 * 420
    assert summary.average_monthly_revenue == pytest.approx(7520 / 12)
