import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from .models import Registration

logger = logging.getLogger(__name__)


class RegistrationRepository:
    """
    Repositório para operações de persistência de registros (leads).

    Expõe apenas as três operações que o resto do sistema consome:
    inserir, listar tudo e eliminar tudo.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create_registration(
        self,
        name: str,
        email: str,
        plan_id: str,
        plan_title: str,
        total_price: float,
        monthly_payment: float,
        amortization_months: int,
        payment_method: Optional[str] = None,
        number_of_installments: Optional[int] = None,
    ) -> Registration:
        """
        Cria um novo registro no banco de dados.
        """
        logger.debug(
            f"Criando registro: name={name}, email={email}, "
            f"plan_id={plan_id}, monthly_payment={monthly_payment}, "
            f"amortization_months={amortization_months}"
        )

        try:
            registration = Registration(
                name=name,
                email=email,
                plan_id=plan_id,
                plan_title=plan_title,
                total_price=total_price,
                monthly_payment=monthly_payment,
                amortization_months=amortization_months,
                payment_method=payment_method,
                number_of_installments=number_of_installments,
            )
            self._db.add(registration)
            self._db.commit()
            self._db.refresh(registration)

            # ASSERT: garantir que o registro foi persistido com ID
            assert registration.id is not None, (
                "Registration persisted without id! "
                "This indicates a persistence error."
            )

            logger.debug(
                f"Registro criado com sucesso: id={registration.id}, email={registration.email}"
            )

            return registration
        except SQLAlchemyError as e:
            logger.error(
                f"Erro de banco de dados ao criar registro: email={email}, "
                f"error={type(e).__name__}: {e}",
                exc_info=True,
            )
            self._db.rollback()
            raise

    def list_all(self) -> List[Registration]:
        """
        Retorna todos os registros, do mais recente para o mais antigo.
        """
        try:
            return (
                self._db.query(Registration)
                .order_by(Registration.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Erro de banco de dados ao listar registros: "
                f"error={type(e).__name__}: {e}",
                exc_info=True,
            )
            raise

    def delete_all(self) -> int:
        """
        Remove todos os registros numa única instrução DELETE.
        Retorna a quantidade de linhas removidas.
        """
        try:
            deleted = self._db.query(Registration).delete(synchronize_session=False)
            self._db.commit()
            logger.info(f"Registros eliminados: count={deleted}")
            return deleted
        except SQLAlchemyError as e:
            logger.error(
                f"Erro de banco de dados ao eliminar registros: "
                f"error={type(e).__name__}: {e}",
                exc_info=True,
            )
            self._db.rollback()
            raise
