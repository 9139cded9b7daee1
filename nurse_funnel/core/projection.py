"""
Projeção de receita de 12 meses por coortes (ativos x abandonos).

Simulação simples: metade dos registros (arredondando para cima) é
tratada como ativa e paga a cuota do plano durante os meses de
amortização; a outra metade abandona nos primeiros 6 meses e paga
uma penalidade fixa a partir do mês do abandono até o mês 6.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import MonthlyProjection

logger = logging.getLogger(__name__)

PROJECTION_MONTHS = 12
ABANDONMENT_COST_PER_MONTH = 420  # 7€/hora × 60 horas
DROPOUT_WINDOW_MONTHS = 6

# Distribuição dos abandonos nos primeiros 6 meses (mês, fração)
DROPOUT_DISTRIBUTION: Tuple[Tuple[int, float], ...] = (
    (1, 0.30),
    (2, 0.30),
    (3, 0.10),
    (4, 0.10),
    (5, 0.10),
    (6, 0.10),
)


@dataclass(frozen=True)
class ProjectionSummary:
    total_revenue: float
    average_monthly_revenue: float


def split_cohorts(registrations: Sequence) -> Tuple[list, list]:
    """
    Divide por posição: os primeiros ceil(N/2) são ativos, o resto abandona.
    A ordem de entrada é preservada.
    """
    cut = math.ceil(len(registrations) / 2)
    return list(registrations[:cut]), list(registrations[cut:])


def dropout_month_for_rank(rank: float) -> int:
    """
    Mês de abandono para um rank normalizado em [0, 1).

    Primeiro mês cujo percentual acumulado é estritamente maior que o rank;
    o acumulado é somado em sequência (ponto flutuante) e, se nenhum
    bucket casar, o mês 1 é usado.
    """
    accumulated = 0.0
    for month, percentage in DROPOUT_DISTRIBUTION:
        accumulated += percentage
        if rank < accumulated:
            return month
    return 1


def assign_dropout_months(dropped: Sequence) -> List[int]:
    size = len(dropped)
    return [dropout_month_for_rank(index / size) for index in range(size)]


def project_monthly_revenue(
    registrations: Sequence,
    months: int = PROJECTION_MONTHS,
) -> List[MonthlyProjection]:
    """
    Calcula a projeção mês a mês.

    Args:
        registrations: registros na ordem devolvida pelo banco
            (mais recente primeiro); precisam de `monthly_payment`
            e `amortization_months`
        months: horizonte da projeção

    Returns:
        Lista com uma MonthlyProjection por mês, ou lista vazia
        quando não há registros.
    """
    if not registrations:
        return []

    active, dropped = split_cohorts(registrations)
    dropout_months = assign_dropout_months(dropped)

    logger.debug(
        f"Projeção de receita: total={len(registrations)}, "
        f"active={len(active)}, dropped={len(dropped)}"
    )

    rows: List[MonthlyProjection] = []
    for month in range(1, months + 1):
        active_revenue = 0.0
        active_count = 0
        for reg in active:
            # amortization_months = 0 nunca contribui
            if month <= reg.amortization_months:
                active_revenue += reg.monthly_payment
                active_count += 1

        dropped_revenue = 0.0
        dropped_count = 0
        if month <= DROPOUT_WINDOW_MONTHS:
            for dropout_month in dropout_months:
                if month >= dropout_month:
                    dropped_revenue += ABANDONMENT_COST_PER_MONTH
                    dropped_count += 1

        rows.append(
            MonthlyProjection(
                month=month,
                active_count=active_count,
                dropped_count=dropped_count,
                active_revenue=active_revenue,
                dropped_revenue=dropped_revenue,
                total_revenue=active_revenue + dropped_revenue,
            )
        )

    return rows


def summarize_projection(rows: Sequence[MonthlyProjection]) -> ProjectionSummary:
    total = sum(row.total_revenue for row in rows)
    average = total / PROJECTION_MONTHS if rows else 0.0
    return ProjectionSummary(total_revenue=total, average_monthly_revenue=average)
