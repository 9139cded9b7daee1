from uuid import uuid4
from sqlalchemy import Column, Integer, String, DateTime, Float
from datetime import datetime
from .database import Base


def _new_id() -> str:
    return str(uuid4())


class Registration(Base):
    """
    Lead enviado pelo formulário de um plano.

    Criado uma única vez e nunca atualizado; a única remoção é o
    "eliminar todos" do painel administrativo.
    """
    __tablename__ = "registrations"

    id = Column(String(36), primary_key=True, default=_new_id)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False)
    plan_id = Column(String(100), nullable=False)
    plan_title = Column(String(200), nullable=False)
    total_price = Column(Float, nullable=False, default=0)
    monthly_payment = Column(Float, nullable=False, default=0)
    amortization_months = Column(Integer, nullable=False, default=0)
    payment_method = Column(String(100), nullable=True, default="N/A")
    number_of_installments = Column(Integer, nullable=True, default=0)
