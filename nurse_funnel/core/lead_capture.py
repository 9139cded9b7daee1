import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from .errors import ValidationError, PersistenceError
from .models import RegistrationRecord
from .normalizers import parse_currency, parse_months
from ..domain.plans import PlanSelection
from ..storage.repository import RegistrationRepository

logger = logging.getLogger(__name__)

SUCCESS_TITLE = "¡Solicitud enviada!"
SUCCESS_MESSAGE = "Nos pondremos en contacto contigo pronto."
MISSING_FIELDS_MESSAGE = "Por favor completa todos los campos"
RETRY_MESSAGE = "No se pudo enviar la solicitud. Inténtalo de nuevo."


@dataclass(frozen=True)
class LeadFields:
    """Campos numéricos derivados dos textos do plano no momento do envio."""
    plan_title: str
    total_price: float
    monthly_payment: float
    amortization_months: int
    payment_method: str
    number_of_installments: int


def derive_lead_fields(selection: PlanSelection) -> LeadFields:
    """
    Converte a descrição do plano escolhido nos campos gravados no registro.

    Textos mal formatados viram 0 sem levantar erro.
    """
    if selection.variant_name:
        plan_title = f"{selection.title} - {selection.variant_name}"
    else:
        plan_title = selection.title

    return LeadFields(
        plan_title=plan_title,
        total_price=selection.total_investment or 0,
        monthly_payment=parse_currency(selection.monthly_payment),
        amortization_months=parse_months(selection.amortization),
        payment_method=selection.payment_method or "N/A",
        number_of_installments=selection.number_of_installments or 0,
    )


def validate_contact(name: Optional[str], email: Optional[str]) -> None:
    """
    Exige nome e e-mail preenchidos. Não valida formato do e-mail.
    """
    missing = []
    if not name or not name.strip():
        missing.append("name")
    if not email or not email.strip():
        missing.append("email")
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing_fields=missing)


class LeadCaptureService:
    """
    Recebe o envio do formulário de um plano e grava um registro.

    Um envio = uma inserção. Não há chave de idempotência: dois cliques
    geram dois registros.
    """

    def __init__(self, db_session_factory: sessionmaker) -> None:
        self._db_session_factory = db_session_factory

    def submit(self, selection: PlanSelection, name: str, email: str) -> RegistrationRecord:
        """
        Valida, deriva os campos numéricos e persiste o lead.

        Raises:
            ValidationError: nome ou e-mail vazio (nada é gravado)
            PersistenceError: falha no banco
        """
        validate_contact(name, email)
        fields = derive_lead_fields(selection)

        db_session: Session = self._db_session_factory()
        try:
            repo = RegistrationRepository(db_session)
            row = repo.create_registration(
                name=name.strip(),
                email=email.strip(),
                plan_id=selection.id,
                plan_title=fields.plan_title,
                total_price=fields.total_price,
                monthly_payment=fields.monthly_payment,
                amortization_months=fields.amortization_months,
                payment_method=fields.payment_method,
                number_of_installments=fields.number_of_installments,
            )
            logger.info(
                f"Lead registrado: id={row.id}, plan_id={selection.id}, "
                f"monthly_payment={fields.monthly_payment}, "
                f"amortization_months={fields.amortization_months}"
            )
            return RegistrationRecord.from_row(row)
        except SQLAlchemyError as e:
            logger.error(
                f"Falha ao registrar lead: plan_id={selection.id}, "
                f"error={type(e).__name__}: {e}"
            )
            raise PersistenceError(RETRY_MESSAGE) from e
        finally:
            db_session.close()
