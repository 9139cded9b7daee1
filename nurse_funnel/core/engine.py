import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from .errors import PersistenceError
from .lead_capture import LeadCaptureService
from .models import MonthlyProjection, RegistrationRecord
from .notices import InMemoryNoticeStore
from .projection import ProjectionSummary, project_monthly_revenue, split_cohorts, summarize_projection
from .statistics import PlanStat, TotalStats, filter_by_plan_titles, stats_by_plan, total_stats
from ..session.redis_notice_store import RedisNoticeStore
from ..config import AppConfig
from ..domain.plans import PlanSelection
from ..storage.database import create_session_factory
from ..storage.repository import RegistrationRepository

logger = logging.getLogger(__name__)

LIST_ERROR_MESSAGE = "No se pudieron cargar los registros."
DELETE_ERROR_MESSAGE = "No se pudieron eliminar los registros."


@dataclass(frozen=True)
class ProjectionReport:
    """Tudo o que a página de projeção precisa, recalculado a cada leitura."""
    total_registrations: int
    active_registrations: int
    dropped_registrations: int
    monthly: List[MonthlyProjection]
    summary: ProjectionSummary


@dataclass(frozen=True)
class RegistrationsReport:
    """Registros filtrados por plano e suas estatísticas."""
    all_count: int
    registrations: List[RegistrationRecord]
    stats: TotalStats
    plan_stats: List[PlanStat]
    selected_plans: List[str]


class LeadFunnelEngine:
    """
    Núcleo lógico do funil.

    - Grava leads vindos do formulário (via LeadCaptureService)
    - Lê e elimina registros do banco
    - Monta os relatórios do painel (projeção e estatísticas)
    - Guarda os avisos pendentes de cada visitante
    """

    def __init__(self, config: AppConfig) -> None:
        self._config = config

        # Escolher fila de avisos: Redis se configurado, senão InMemory
        if config.redis_url and config.redis_url.strip():
            try:
                self._notices = RedisNoticeStore(
                    redis_url=config.redis_url,
                    ttl_seconds=config.notice_ttl_seconds,
                )
                logger.info(f"Avisos usando Redis: url={config.redis_url}")
            except Exception as e:
                logger.error(f"Erro ao inicializar RedisNoticeStore: {e}, usando InMemory como fallback")
                self._notices = InMemoryNoticeStore()
        else:
            self._notices = InMemoryNoticeStore()
            logger.info("Avisos usando armazenamento em memória (REDIS_URL não configurado)")

        # Extrair tipo de DB da URL (sem credenciais)
        db_type = "sqlite" if "sqlite" in config.database_url else "postgres" if "postgres" in config.database_url else "unknown"

        # Em produção, não criar tabelas automaticamente (usar Alembic)
        create_tables = config.env == "dev"
        self._db_session_factory = create_session_factory(config.database_url, create_tables=create_tables)
        self._lead_capture = LeadCaptureService(self._db_session_factory)

        logger.info(f"LeadFunnelEngine inicializado: database_type={db_type}, env={config.env}")

    @property
    def notices(self):
        return self._notices

    def submit_lead(self, selection: PlanSelection, name: str, email: str) -> RegistrationRecord:
        return self._lead_capture.submit(selection, name=name, email=email)

    def list_registrations(self) -> List[RegistrationRecord]:
        """
        Lê todos os registros, do mais recente para o mais antigo.

        Raises:
            PersistenceError: falha no banco
        """
        db_session: Session = self._db_session_factory()
        try:
            rows = RegistrationRepository(db_session).list_all()
            return [RegistrationRecord.from_row(row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(LIST_ERROR_MESSAGE) from e
        finally:
            db_session.close()

    def delete_all_registrations(self) -> int:
        """
        Elimina todos os registros (ação administrativa irreversível).

        Raises:
            PersistenceError: falha no banco
        """
        db_session: Session = self._db_session_factory()
        try:
            deleted = RegistrationRepository(db_session).delete_all()
            logger.warning(f"Todos os registros foram eliminados: count={deleted}")
            return deleted
        except SQLAlchemyError as e:
            raise PersistenceError(DELETE_ERROR_MESSAGE) from e
        finally:
            db_session.close()

    def projection_report(self) -> ProjectionReport:
        registrations = self.list_registrations()
        active, dropped = split_cohorts(registrations)
        monthly = project_monthly_revenue(registrations)
        return ProjectionReport(
            total_registrations=len(registrations),
            active_registrations=len(active),
            dropped_registrations=len(dropped),
            monthly=monthly,
            summary=summarize_projection(monthly),
        )

    def registrations_report(self, plan_titles: Optional[Iterable[str]] = None) -> RegistrationsReport:
        registrations = self.list_registrations()
        selected = [title for title in (plan_titles or []) if title]
        filtered = filter_by_plan_titles(registrations, selected)
        return RegistrationsReport(
            all_count=len(registrations),
            registrations=filtered,
            stats=total_stats(filtered),
            plan_stats=stats_by_plan(filtered),
            selected_plans=selected,
        )

    def check_database(self) -> bool:
        """Executa um SELECT 1 para o health check."""
        from sqlalchemy import text

        db_session: Session = self._db_session_factory()
        try:
            db_session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check falhou: {e}")
            return False
        finally:
            db_session.close()
