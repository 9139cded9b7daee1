"""
Gráficos do painel, renderizados no servidor com Plotly.

Cada função devolve um fragmento HTML pronto para o template.
"""
from typing import Sequence, Union

import plotly.graph_objects as go

from ..core.models import MonthlyProjection
from ..core.normalizers import format_euro
from ..core.statistics import PlanStat

ACTIVE_COLOR = "#22c55e"
DROPPED_COLOR = "#ef4444"
TOTAL_COLOR = "#8b5cf6"
PLAN_COLORS = ["#8b5cf6", "#06b6d4", "#10b981", "#f59e0b", "#ef4444"]


def _to_html(fig: go.Figure, include_plotlyjs: Union[bool, str]) -> str:
    return fig.to_html(full_html=False, include_plotlyjs=include_plotlyjs)


def monthly_revenue_chart(rows: Sequence[MonthlyProjection], include_plotlyjs: Union[bool, str] = "cdn") -> str:
    """
    Barras empilhadas (ativos em verde, abandonos em vermelho)
    com a linha do total mensal por cima.
    """
    labels = [f"M{row.month}" for row in rows]
    hover_active = [
        f"{row.active_count} personas - {format_euro(row.active_revenue)}" for row in rows
    ]
    hover_dropped = [
        f"{row.dropped_count} personas - {format_euro(row.dropped_revenue)}" for row in rows
    ]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        name="Activos",
        x=labels,
        y=[row.active_revenue for row in rows],
        marker_color=ACTIVE_COLOR,
        customdata=hover_active,
        hovertemplate="<b>Activos:</b> %{customdata}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        name="Abandonos",
        x=labels,
        y=[row.dropped_revenue for row in rows],
        marker_color=DROPPED_COLOR,
        customdata=hover_dropped,
        hovertemplate="<b>Abandonos:</b> %{customdata}<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        name="Total",
        x=labels,
        y=[row.total_revenue for row in rows],
        mode="lines+markers",
        line=dict(color=TOTAL_COLOR, width=2, shape="spline"),
        customdata=[format_euro(row.total_revenue) for row in rows],
        hovertemplate="<b>Total:</b> %{customdata}<extra></extra>",
    ))

    # Eixo Y em milhares de euros ("12k€")
    max_value = max((row.total_revenue for row in rows), default=0)
    step = max(1000, int(max_value // 5 // 1000 * 1000) or 1000)
    tick_values = list(range(0, int(max_value) + step, step))
    fig.update_layout(
        barmode="stack",
        height=400,
        margin=dict(l=40, r=20, t=20, b=40),
        hovermode="x unified",
        legend=dict(orientation="h", y=-0.15),
        yaxis=dict(
            tickvals=tick_values,
            ticktext=[f"{value // 1000}k€" for value in tick_values],
            gridcolor="#e5e7eb",
            griddash="dash",
        ),
    )
    return _to_html(fig, include_plotlyjs)


def plan_distribution_chart(
    stats: Sequence[PlanStat],
    kind: str = "bar",
    include_plotlyjs: Union[bool, str] = "cdn",
) -> str:
    """
    Distribuição de registros por plano, em barras ou pizza.
    """
    names = [stat.name for stat in stats]
    counts = [stat.count for stat in stats]

    if kind == "pie":
        fig = go.Figure(go.Pie(
            labels=names,
            values=counts,
            text=[f"{stat.name}: {stat.percentage}%" for stat in stats],
            textinfo="text",
            marker=dict(colors=[PLAN_COLORS[i % len(PLAN_COLORS)] for i in range(len(stats))]),
            sort=False,
        ))
        fig.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20), showlegend=False)
        return _to_html(fig, include_plotlyjs)

    if kind != "bar":
        raise ValueError(f"Tipo de gráfico desconhecido: {kind}")

    fig = go.Figure(go.Bar(
        name="Número de registros",
        x=names,
        y=counts,
        marker_color=PLAN_COLORS[0],
    ))
    fig.update_layout(
        height=300,
        margin=dict(l=40, r=20, t=20, b=100),
        xaxis=dict(tickangle=-45),
        showlegend=True,
        legend=dict(orientation="h", y=1.1),
    )
    return _to_html(fig, include_plotlyjs)
