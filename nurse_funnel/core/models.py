from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RegistrationRecord:
    """
    Cópia imutável de um registro lido do banco.
    Desacoplada da sessão SQLAlchemy para os cálculos do painel.
    """
    id: str
    created_at: datetime
    name: str
    email: str
    plan_id: str
    plan_title: str
    total_price: float = 0.0
    monthly_payment: float = 0.0
    amortization_months: int = 0
    payment_method: Optional[str] = None
    number_of_installments: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "RegistrationRecord":
        return cls(
            id=row.id,
            created_at=row.created_at,
            name=row.name,
            email=row.email,
            plan_id=row.plan_id,
            plan_title=row.plan_title,
            total_price=row.total_price or 0.0,
            monthly_payment=row.monthly_payment or 0.0,
            amortization_months=row.amortization_months or 0,
            payment_method=row.payment_method,
            number_of_installments=row.number_of_installments,
        )


@dataclass(frozen=True)
class MonthlyProjection:
    """
    Linha da projeção mensal de receita.
    As contagens são informativas; o total soma apenas as receitas.
    """
    month: int
    active_count: int
    dropped_count: int
    active_revenue: float
    dropped_revenue: float
    total_revenue: float
