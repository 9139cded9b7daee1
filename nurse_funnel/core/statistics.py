from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence


@dataclass(frozen=True)
class PlanStat:
    name: str
    count: int
    percentage: str  # uma casa decimal, pronto para exibição


@dataclass(frozen=True)
class TotalStats:
    total_registrations: int
    total_revenue: float
    average_revenue: float
    most_popular_plan: str


def filter_by_plan_titles(registrations: Sequence, plan_titles: Iterable[str]) -> list:
    """
    Filtra pelos títulos de plano selecionados.
    Seleção vazia devolve todos os registros.
    """
    selected = set(plan_titles or [])
    if not selected:
        return list(registrations)
    return [reg for reg in registrations if reg.plan_title in selected]


def stats_by_plan(registrations: Sequence) -> List[PlanStat]:
    """
    Contagem por título de plano, na ordem em que cada título aparece.
    """
    counts: Dict[str, int] = {}
    for reg in registrations:
        counts[reg.plan_title] = counts.get(reg.plan_title, 0) + 1

    total = len(registrations)
    return [
        PlanStat(
            name=name,
            count=count,
            percentage=f"{count / total * 100:.1f}" if total > 0 else "0",
        )
        for name, count in counts.items()
    ]


def total_stats(registrations: Sequence) -> TotalStats:
    """
    Totais do painel. Em empate, o plano mais popular é o primeiro
    encontrado (ordenação estável por contagem).
    """
    total_revenue = sum(reg.total_price for reg in registrations)
    average_revenue = total_revenue / len(registrations) if registrations else 0

    ranked = sorted(stats_by_plan(registrations), key=lambda stat: stat.count, reverse=True)
    most_popular = (ranked[0].name if ranked else "") or "N/A"

    return TotalStats(
        total_registrations=len(registrations),
        total_revenue=total_revenue,
        average_revenue=average_revenue,
        most_popular_plan=most_popular,
    )
