import logging
import time
from pathlib import Path
from uuid import uuid4
from fastapi import FastAPI, Form, HTTPException, Header, Query, Request, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Optional, List
from pydantic import BaseModel
from datetime import datetime
from ..config import AppConfig
from ..core.engine import LeadFunnelEngine
from ..core.errors import PersistenceError, ValidationError
from ..core.lead_capture import SUCCESS_MESSAGE, SUCCESS_TITLE
from ..core.normalizers import format_date_es, format_euro, format_number_es, split_monthly_payment
from ..core.notices import Notice
from ..core.projection import ABANDONMENT_COST_PER_MONTH
from ..domain.plans import (
    ADVISOR,
    DEFAULT_FINANCING_INSTALLMENTS,
    GALLERY_ITEMS,
    MAX_FINANCING_INSTALLMENTS,
    MIN_FINANCING_INSTALLMENTS,
    PROGRAM_SERVICES,
    PROMOTION,
    PlanVariant,
    WORKING_DAYS_PER_MONTH,
    build_selection,
    estimate_investment_recovery,
    list_plans,
    monthly_payment_display,
    net_daily_salary,
    resolve_payment_choice,
    shared_investment_plans,
)
from .charts import monthly_revenue_chart, plan_distribution_chart

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
VISITOR_COOKIE = "visitor_id"
VISITOR_COOKIE_MAX_AGE = 30 * 24 * 3600


class RegistrationOut(BaseModel):
    id: str
    created_at: datetime
    name: str
    email: str
    plan_id: str
    plan_title: str
    total_price: float
    monthly_payment: float
    amortization_months: int
    payment_method: Optional[str] = None
    number_of_installments: Optional[int] = None


class MonthlyProjectionOut(BaseModel):
    month: int
    active_count: int
    dropped_count: int
    active_revenue: float
    dropped_revenue: float
    total_revenue: float


class ProjectionOut(BaseModel):
    total_registrations: int
    active_registrations: int
    dropped_registrations: int
    total_revenue: float
    average_monthly_revenue: float
    months: List[MonthlyProjectionOut]


class PlanStatOut(BaseModel):
    name: str
    count: int
    percentage: str


class StatisticsOut(BaseModel):
    total_registrations: int
    total_revenue: float
    average_revenue: float
    most_popular_plan: str
    plans: List[PlanStatOut]


class DeleteAllResponse(BaseModel):
    ok: bool
    deleted: int


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware que gera request_id único para cada requisição
    e adiciona aos logs e headers de resposta.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = uuid4().hex[:16]
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request processado: request_id={request_id}, "
            f"method={request.method}, path={request.url.path}, "
            f"status={response.status_code}, duration_ms={duration_ms:.2f}"
        )

        return response


def require_api_key(config: AppConfig, provided_key: Optional[str], challenge: bool = False) -> None:
    """
    Valida a chave administrativa baseado no ambiente.

    Em produção (ENV=prod), sempre exige a chave.
    Em desenvolvimento (ENV=dev), só exige se ADMIN_API_KEY estiver configurada.
    `challenge=True` devolve o cabeçalho para o navegador pedir usuário/senha.
    """
    expected_key = config.admin_api_key or ""
    headers = {"WWW-Authenticate": "Basic"} if challenge else None

    if config.env == "prod":
        if not provided_key or provided_key != expected_key:
            logger.warning("Tentativa de acesso não autorizado em PRODUÇÃO")
            raise HTTPException(status_code=401, detail="Invalid API key", headers=headers)
    else:
        if expected_key and expected_key.strip():
            if provided_key != expected_key:
                logger.warning("Tentativa de acesso não autorizado em DEV")
                raise HTTPException(status_code=401, detail="Invalid API key", headers=headers)
        else:
            logger.debug("ADMIN_API_KEY não configurada, aceitando requisição sem autenticação (modo desenvolvimento)")


def mask_email(email: str) -> str:
    """
    Retorna o e-mail parcialmente mascarado para logs.
    Ex: "maria@example.com" -> "ma****@example.com"
    """
    local, _, domain = email.partition("@")
    if len(local) <= 2:
        return f"****@{domain}"
    return f"{local[:2]}****@{domain}"


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Cria a aplicação FastAPI e injeta dependências principais (config + engine).
    """
    config = config or AppConfig.load_from_env()
    engine = LeadFunnelEngine(config=config)

    app = FastAPI(
        title="Programa Enfermería Noruega",
        version="0.1.0",
        description="Web de captación de leads y panel de administración.",
    )
    app.state.engine = engine
    app.state.config = config

    app.add_middleware(RequestIDMiddleware)
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")

    templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
    templates.env.filters["euro"] = format_euro
    templates.env.filters["es_date"] = format_date_es
    templates.env.filters["es_number"] = format_number_es
    templates.env.globals["booking_url"] = config.booking_url
    templates.env.globals["instagram_url"] = config.instagram_url

    basic_auth = HTTPBasic(auto_error=False)

    def require_admin(credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth)) -> None:
        require_api_key(config, credentials.password if credentials else None, challenge=True)

    def visitor_id_for(request: Request) -> str:
        return request.cookies.get(VISITOR_COOKIE) or uuid4().hex

    def render(request: Request, template: str, context: dict, status_code: int = 200) -> HTMLResponse:
        """
        Renderiza o template com os avisos pendentes do visitante
        e garante o cookie de visitante na resposta.
        """
        visitor_id = visitor_id_for(request)
        context = dict(context)
        context["notices"] = engine.notices.pop_all(visitor_id)
        response = templates.TemplateResponse(request, template, context, status_code=status_code)
        response.set_cookie(VISITOR_COOKIE, visitor_id, max_age=VISITOR_COOKIE_MAX_AGE, httponly=True, samesite="lax")
        return response

    def redirect_with_notice(request: Request, url: str, notice: Notice) -> RedirectResponse:
        visitor_id = visitor_id_for(request)
        engine.notices.push(visitor_id, notice)
        response = RedirectResponse(url, status_code=303)
        response.set_cookie(VISITOR_COOKIE, visitor_id, max_age=VISITOR_COOKIE_MAX_AGE, httponly=True, samesite="lax")
        return response

    def resolve_variant(plan_id: str) -> PlanVariant:
        try:
            return PlanVariant.from_plan_id(plan_id)
        except KeyError:
            logger.warning(f"Plano desconhecido solicitado: plan_id={plan_id}")
            raise HTTPException(status_code=404, detail="Plan no encontrado")

    def form_context(variant: PlanVariant, method: Optional[str], installments: Optional[int]) -> dict:
        """
        Monta o contexto do formulário: o plano escolhido é carregado
        explicitamente pela query/hidden fields, sem estado global.
        """
        payment_method = None
        number_of_installments = None
        if variant.requires_payment_choice:
            payment_method, number_of_installments = resolve_payment_choice(method, installments)
        selection = build_selection(variant.plan, payment_method, number_of_installments)

        monthly_text = monthly_payment_display(selection)
        monthly_main, monthly_detail = split_monthly_payment(monthly_text)
        return {
            "variant": variant,
            "plan": variant.plan,
            "selection": selection,
            "payment_method": payment_method,
            "monthly_text": monthly_text,
            "monthly_main": monthly_main,
            "monthly_detail": monthly_detail,
            "recovery": estimate_investment_recovery(selection.total_investment),
            "net_daily_salary": format_number_es(net_daily_salary(), decimals=2),
            "working_days": WORKING_DAYS_PER_MONTH,
            "advisor": ADVISOR,
        }

    @app.get("/health")
    def health_check():
        """
        Endpoint de health check para monitoramento e Docker healthchecks.
        """
        redis_ok = True
        if config.redis_url and config.redis_url.strip():
            try:
                from redis import Redis
                Redis.from_url(config.redis_url).ping()
            except Exception as e:
                logger.warning(f"Redis health check falhou: {e}")
                redis_ok = False

        db_ok = engine.check_database()
        status = "healthy" if (redis_ok and db_ok) else "degraded"
        return {
            "status": status,
            "redis": "ok" if redis_ok else "error",
            "database": "ok" if db_ok else "error",
        }

    # ---------- Web pública ----------
    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        return render(request, "index.html", {
            "promotion": PROMOTION,
            "services": PROGRAM_SERVICES,
            "financing_plan": PlanVariant.FINANCIACION_TOTAL.plan,
            "shared_plans": shared_investment_plans(),
            "complete_plan": PlanVariant.INVERSION_COMPLETA.plan,
            "gallery": GALLERY_ITEMS,
            "advisor": ADVISOR,
            "min_installments": MIN_FINANCING_INSTALLMENTS,
            "max_installments": MAX_FINANCING_INSTALLMENTS,
            "default_installments": DEFAULT_FINANCING_INSTALLMENTS,
        })

    @app.get("/solicitud", response_class=HTMLResponse)
    def lead_form(
        request: Request,
        plan: str = Query(...),
        metodo: Optional[str] = Query(default=None),
        pagos: Optional[int] = Query(default=None),
    ):
        variant = resolve_variant(plan)
        context = form_context(variant, metodo, pagos)
        context.update({"name": "", "email": "", "error": None})
        return render(request, "lead_form.html", context)

    @app.post("/solicitud", response_class=HTMLResponse)
    def submit_lead(
        request: Request,
        plan_id: str = Form(...),
        payment_method: Optional[str] = Form(default=None),
        installments: Optional[int] = Form(default=None),
        name: str = Form(default=""),
        email: str = Form(default=""),
    ):
        request_id = getattr(request.state, "request_id", "unknown")
        variant = resolve_variant(plan_id)
        context = form_context(variant, payment_method, installments)

        logger.info(
            f"Recebido formulário de lead: request_id={request_id}, "
            f"plan_id={plan_id}, email={mask_email(email)}"
        )

        start_time = time.time()
        try:
            record = engine.submit_lead(context["selection"], name=name, email=email)
        except ValidationError as e:
            logger.info(
                f"Formulário incompleto: request_id={request_id}, missing={e.missing_fields}"
            )
            context.update({"name": name, "email": email, "error": str(e)})
            return render(request, "lead_form.html", context, status_code=422)
        except PersistenceError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Erro ao salvar lead: request_id={request_id}, "
                f"plan_id={plan_id}, duration_ms={duration_ms:.2f}, error={e}",
                exc_info=True,
            )
            context.update({"name": name, "email": email, "error": str(e)})
            return render(request, "lead_form.html", context, status_code=503)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Lead salvo: request_id={request_id}, id={record.id}, duration_ms={duration_ms:.2f}"
        )
        return redirect_with_notice(request, "/", Notice(SUCCESS_TITLE, SUCCESS_MESSAGE))

    # ---------- Painel administrativo ----------
    @app.get("/admin", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
    def admin_projection(request: Request):
        try:
            report = engine.projection_report()
        except PersistenceError as e:
            logger.error(f"Erro ao montar projeção: error={e}", exc_info=True)
            return render(request, "admin.html", {"report": None, "error": str(e)}, status_code=503)

        chart = monthly_revenue_chart(report.monthly) if report.monthly else ""
        return render(request, "admin.html", {
            "report": report,
            "chart": chart,
            "error": None,
            "abandonment_cost": ABANDONMENT_COST_PER_MONTH,
        })

    @app.get("/admin/registrations", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
    def admin_registrations(request: Request, plan: List[str] = Query(default=[])):
        plan_titles = [p.display_title for p in list_plans()]
        try:
            report = engine.registrations_report(plan)
        except PersistenceError as e:
            logger.error(f"Erro ao listar registros: error={e}", exc_info=True)
            return render(request, "admin_registrations.html", {
                "report": None,
                "error": str(e),
                "plan_titles": plan_titles,
            }, status_code=503)

        return render(request, "admin_registrations.html", {
            "report": report,
            "error": None,
            "plan_titles": plan_titles,
            "bar_chart": plan_distribution_chart(report.plan_stats, kind="bar"),
            "pie_chart": plan_distribution_chart(report.plan_stats, kind="pie", include_plotlyjs=False),
        })

    @app.post("/admin/registrations/delete", dependencies=[Depends(require_admin)])
    def admin_delete_all(request: Request, confirm: str = Form(default="")):
        if confirm != "yes":
            return redirect_with_notice(request, "/admin/registrations", Notice(
                "Eliminación cancelada",
                "Marca la casilla de confirmación para eliminar todos los registros.",
                variant="destructive",
            ))
        try:
            engine.delete_all_registrations()
        except PersistenceError as e:
            logger.error(f"Erro ao eliminar registros: error={e}", exc_info=True)
            return redirect_with_notice(request, "/admin/registrations", Notice(
                "Error al eliminar registros", str(e), variant="destructive",
            ))
        return redirect_with_notice(request, "/admin/registrations", Notice(
            "Registros eliminados",
            "Todos los registros han sido eliminados correctamente.",
        ))

    # ---------- API JSON (admin) ----------
    def api_guard(x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY")) -> None:
        require_api_key(config, x_api_key)

    @app.get("/api/registrations", response_model=List[RegistrationOut], dependencies=[Depends(api_guard)])
    def api_list_registrations():
        try:
            records = engine.list_registrations()
        except PersistenceError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return [RegistrationOut(**record.__dict__) for record in records]

    @app.get("/api/projection", response_model=ProjectionOut, dependencies=[Depends(api_guard)])
    def api_projection():
        try:
            report = engine.projection_report()
        except PersistenceError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return ProjectionOut(
            total_registrations=report.total_registrations,
            active_registrations=report.active_registrations,
            dropped_registrations=report.dropped_registrations,
            total_revenue=report.summary.total_revenue,
            average_monthly_revenue=report.summary.average_monthly_revenue,
            months=[MonthlyProjectionOut(**row.__dict__) for row in report.monthly],
        )

    @app.get("/api/statistics", response_model=StatisticsOut, dependencies=[Depends(api_guard)])
    def api_statistics(plan: List[str] = Query(default=[])):
        try:
            report = engine.registrations_report(plan)
        except PersistenceError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return StatisticsOut(
            total_registrations=report.stats.total_registrations,
            total_revenue=report.stats.total_revenue,
            average_revenue=report.stats.average_revenue,
            most_popular_plan=report.stats.most_popular_plan,
            plans=[PlanStatOut(**stat.__dict__) for stat in report.plan_stats],
        )

    @app.delete("/api/registrations", response_model=DeleteAllResponse, dependencies=[Depends(api_guard)])
    def api_delete_all(request: Request):
        request_id = getattr(request.state, "request_id", "unknown")
        try:
            deleted = engine.delete_all_registrations()
        except PersistenceError as e:
            raise HTTPException(status_code=503, detail=str(e))
        logger.info(f"Registros eliminados via API: request_id={request_id}, count={deleted}")
        return DeleteAllResponse(ok=True, deleted=deleted)

    return app
