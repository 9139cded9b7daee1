"""
Catálogo de planes del programa de enfermería en Noruega.

Os planos carregam seus valores numéricos tipados; os textos exibidos
("375€ al mes", "22 meses en la RedGW") são derivados desses números.
Cada variante traz junto os seus dados de exibição (títulos de contato,
tabela de descontos, estilo premium), sem flags espalhadas por id.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.normalizers import format_euro, format_number_es

# Salário líquido médio de enfermagem na Noruega, usado na estimativa de retorno
NET_MONTHLY_SALARY = 3077
WORKING_DAYS_PER_MONTH = 20

MIN_FINANCING_INSTALLMENTS = 2
MAX_FINANCING_INSTALLMENTS = 37
DEFAULT_FINANCING_INSTALLMENTS = 12

FIORDO_MONTHLY_PAYMENT_MESSAGE = "375€/mes en los 4 primeros meses del Programa"


class PaymentMethod(str, Enum):
    """Forma de pagamento da Inversión Completa."""
    DIRECT = "direct"
    FINANCING = "financing"

    @property
    def label(self) -> str:
        return "Pago directo a GW" if self is PaymentMethod.DIRECT else "Con financiación"


@dataclass(frozen=True)
class GratuityTable:
    """
    Tabela de descontos por tempo trabalhado na RedGW.
    `scenarios` são as colunas; cada linha tem um valor por cenário.
    """
    scenarios: Tuple[str, ...]
    rows: Tuple[Tuple[str, Tuple[str, ...]], ...]


@dataclass(frozen=True)
class Plan:
    id: str
    title: str
    monthly_payment: float
    amortization_months: int
    notes: str
    variant_name: Optional[str] = None
    total_investment: Optional[float] = None
    contact_title: Optional[str] = None
    contact_description: Optional[str] = None
    gratuity: Optional[GratuityTable] = None
    premium_style: bool = False

    @property
    def display_title(self) -> str:
        if self.variant_name:
            return f"{self.title} - {self.variant_name}"
        return self.title

    @property
    def monthly_payment_text(self) -> str:
        return f"{format_euro(self.monthly_payment)} al mes"

    @property
    def amortization_text(self) -> str:
        return f"{self.amortization_months} meses en la RedGW"


@dataclass(frozen=True)
class PlanSelection:
    """
    Descrição do plano escolhido, no formato que o formulário consome:
    valores monetários e prazos chegam como textos de exibição.
    """
    id: str
    title: str
    monthly_payment: str
    amortization: str
    variant_name: Optional[str] = None
    total_investment: Optional[float] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    number_of_installments: Optional[int] = None


_WORKED_5_12 = "Trabajando como enfermera entre 5 y 12 meses en la RedGW"
_DISCOUNT_EUR = "Descuento del que te beneficias por trabajar en la RedGW"
_DISCOUNT_PCT = "% de descuento que recibes por trabajar en la RedGW como enfermera"
_NOTHING_TO_PAY = "No es necesario abonar ningún importe"


def _confirm_description(variant_name: str) -> str:
    return (
        f"Déjanos tus datos para confirmar que la {variant_name} es la opción que te interesa "
        "y te guiaremos para que puedas aprovecharla al máximo, resolviendo todas tus dudas."
    )


class PlanVariant(Enum):
    """Todas as ofertas do programa, cada uma com seus próprios dados."""

    FINANCIACION_TOTAL = Plan(
        id="financiacion-total",
        title="Financiación Total",
        monthly_payment=0,
        amortization_months=30,
        total_investment=0,
        notes=(
            "No pagas nada durante la formación y amortizas la inversión "
            "trabajando 30 meses en la Red Global Working."
        ),
        contact_title="Activa tu camino con el Modelo de Amortización Total",
        contact_description=(
            "Déjanos tus datos y te guiaremos para que puedas aprovechar al máximo "
            "esta modalidad y resolveremos todas tus dudas."
        ),
        gratuity=GratuityTable(
            scenarios=(
                _WORKED_5_12,
                "Trabajando como enfermera entre 13 y 24 meses en la RedGW",
                "Trabajando como enfermera entre 25 y 30 meses en la RedGW",
                "Trabajando como enfermera más de 30 meses en la RedGW",
            ),
            rows=(
                (_DISCOUNT_EUR, ("0€", "2.300€", "3.000€", "5.300€")),
                (_DISCOUNT_PCT, ("0%", "28,30%", "56,60%", "100%")),
            ),
        ),
    )
    AURORA = Plan(
        id="inversion-compartida-aurora",
        title="Inversión Compartida",
        variant_name="Modalidad Aurora",
        monthly_payment=125,
        amortization_months=16,
        notes="Equilibrio entre cuota reducida y rápida amortización en la RedGW.",
        contact_title="Activa tu camino con la Modalidad Aurora",
        contact_description=_confirm_description("Modalidad Aurora"),
        gratuity=GratuityTable(
            scenarios=(
                _WORKED_5_12,
                "Trabajando como enfermera entre 13 y 18 meses en la RedGW",
                "Trabajando como enfermera a partir del mes 19 en la RedGW",
            ),
            rows=(
                (_DISCOUNT_EUR, ("0€", "1.550€", _NOTHING_TO_PAY)),
                (_DISCOUNT_PCT, ("0%", "29%", "")),
            ),
        ),
    )
    FIORDO = Plan(
        id="inversion-compartida-fiordo",
        title="Inversión Compartida",
        variant_name="Modalidad Fiordo",
        monthly_payment=375,
        amortization_months=22,
        notes="Mayor tiempo de amortización con una cuota mensual intermedia.",
        contact_title="Da el paso a la Modalidad Fiordo",
        contact_description=_confirm_description("Modalidad Fiordo"),
        gratuity=GratuityTable(
            scenarios=(
                _WORKED_5_12,
                "Trabajando como enfermera entre 13 y 20 meses en la RedGW",
                "Trabajando como enfermera entre 21 y 22 meses en la RedGW",
                "Trabajando como enfermera más de 22 meses en la RedGW",
            ),
            rows=(
                (_DISCOUNT_EUR, ("0€", "1.500€", "3.000€", _NOTHING_TO_PAY)),
                (_DISCOUNT_PCT, ("0,0%", "39,47%", "78,95%", "")),
            ),
        ),
        premium_style=True,
    )
    VIKINGA = Plan(
        id="inversion-compartida-vikinga",
        title="Inversión Compartida",
        variant_name="Modalidad Vikinga",
        monthly_payment=625,
        amortization_months=18,
        notes="Impulso intensivo para completar la amortización con rapidez.",
        contact_title="Impulsa tu candidatura con la Modalidad Vikinga",
        contact_description=_confirm_description("Modalidad Vikinga"),
        gratuity=GratuityTable(
            scenarios=(
                _WORKED_5_12,
                "Trabajando como enfermera entre 13 y 18 meses en la RedGW",
                "Trabajando como enfermera más de 18 meses en la RedGW",
            ),
            rows=(
                ("Cantidad a abonar si se abandona la RedGW", ("2.800€", "1.300€", "0€")),
                (_DISCOUNT_EUR, ("0€", "1.500€", "2.800€")),
                (_DISCOUNT_PCT, ("0,00%", "28,30%", "52,83%")),
            ),
        ),
    )
    INVERSION_COMPLETA = Plan(
        id="inversion-completa",
        title="Inversión Completa",
        monthly_payment=1325,
        amortization_months=0,
        notes=(
            "Accedes a toda la formación y acompañamiento sin compromiso "
            "de permanencia ni amortización."
        ),
    )

    @property
    def plan(self) -> Plan:
        return self.value

    @property
    def is_shared_investment(self) -> bool:
        return self in (PlanVariant.AURORA, PlanVariant.FIORDO, PlanVariant.VIKINGA)

    @property
    def shows_advisor_contact(self) -> bool:
        return self.plan.contact_title is not None

    @property
    def requires_payment_choice(self) -> bool:
        return self is PlanVariant.INVERSION_COMPLETA

    @classmethod
    def from_plan_id(cls, plan_id: str) -> "PlanVariant":
        for variant in cls:
            if variant.plan.id == plan_id:
                return variant
        raise KeyError(plan_id)


PROGRAM_SERVICES: List[str] = [
    "Curso de Noruego hasta el B1+",
    "Curso de Helsenorsk (Noruego sanitario y procesos de trabajo en enfermería)",
    "Curso de Helsenorsk Enfermedades y Tratamientos",
    "Curso de Desarrollo Profesional y Cultura",
    "Curso Guía para la Vida en Noruega",
    "Autorización de trabajo",
    "Inserción Profesional en Noruega",
    "Coordinador/a durante el programa y tu llegada a Noruega",
]

PROMOTION: Dict[str, str] = {
    "name": "Promoción 113 Online",
    "dates": "Febrero 2025 - Diciembre 2026",
    "headline": "Tu Futuro Profesional en Noruega Comienza Aquí",
    "subtitle": "Programa de Formación y Desarrollo del Talento para Enfermeros",
}

ADVISOR: Dict[str, str] = {
    "name": "Amanda Casado",
    "role": "Especialista en Selección y Desarrollo del Talento",
    "photo": "amanda-casado.jpg",
}


@dataclass(frozen=True)
class GalleryImage:
    src: str
    alt: str


@dataclass(frozen=True)
class GalleryItem:
    """Uma imagem isolada ou uma coluna com várias imagens empilhadas."""
    images: Tuple[GalleryImage, ...]
    stacked: bool = False


GALLERY_ITEMS: List[GalleryItem] = [
    GalleryItem((GalleryImage("giuseppe-nicolo.jpg", "Giuseppe y Nicolò - Global Workers en Noruega"),)),
    GalleryItem((GalleryImage("esther-villagomez.jpg", "Esther Villagómez - Enfermera en Noruega"),)),
    GalleryItem((GalleryImage("laura-copovi.jpg", "Laura Copoví - Trabajando en Noruega"),)),
    GalleryItem((GalleryImage("luis-treti.jpg", "Luis - Disfrutando la vida en Noruega"),)),
    GalleryItem((GalleryImage("isaac-sakrisoy.jpg", "Isaac Calvo Valls - Sakrisøy, Noruega"),)),
    GalleryItem((GalleryImage("maria-zamora.jpg", "María Zamora - Global Working Enfermería Noruega"),)),
    GalleryItem(
        (
            GalleryImage("alejandra-rafa.jpg", "Alejandra y Rafa - Aurora Boreal en Noruega"),
            GalleryImage("laura-gutierrez.jpg", "Laura Gutiérrez Jiménez - Enfermera en el Valhalla"),
        ),
        stacked=True,
    ),
    GalleryItem((GalleryImage("jordi-javi-martorell.jpg", "Jordi y Javi Martorell - Vengsøy, Troms, Noruega"),)),
    GalleryItem((GalleryImage("jessica-asensio.jpeg", "Jessica Asensio - Enfermera en Noruega"),)),
    GalleryItem((GalleryImage("guille-martin.jpg", "Guille Martín Sáez - Enfermero trabajando en Noruega"),)),
    GalleryItem((GalleryImage("promo-90.jpg", "Promoción 90 - Global Workers"),)),
    GalleryItem((GalleryImage("grupo-certificados.jpg", "Grupo de certificados - Global Workers"),)),
]


def list_plans() -> List[Plan]:
    return [variant.plan for variant in PlanVariant]


def shared_investment_plans() -> List[Plan]:
    return [variant.plan for variant in PlanVariant if variant.is_shared_investment]


def get_plan(plan_id: str) -> Plan:
    """Levanta KeyError se o id não existir no catálogo."""
    return PlanVariant.from_plan_id(plan_id).plan


def resolve_payment_choice(
    method: Optional[str],
    installments: Optional[int],
) -> Tuple[PaymentMethod, int]:
    """
    Normaliza a escolha de pagamento da Inversión Completa.

    Pagamento direto é sempre 1 pagamento; financiamento fica entre 2 e 37
    pagamentos (12 quando não informado).
    """
    try:
        payment_method = PaymentMethod(method) if method else PaymentMethod.DIRECT
    except ValueError:
        payment_method = PaymentMethod.DIRECT

    if payment_method is PaymentMethod.DIRECT:
        return payment_method, 1

    if installments is None:
        return payment_method, DEFAULT_FINANCING_INSTALLMENTS
    clamped = max(MIN_FINANCING_INSTALLMENTS, min(MAX_FINANCING_INSTALLMENTS, installments))
    return payment_method, clamped


def build_selection(
    plan: Plan,
    payment_method: Optional[PaymentMethod] = None,
    installments: Optional[int] = None,
) -> PlanSelection:
    """
    Monta a descrição do plano escolhido, com os textos de exibição
    derivados dos valores numéricos do catálogo.
    """
    return PlanSelection(
        id=plan.id,
        title=plan.title,
        variant_name=plan.variant_name,
        monthly_payment=plan.monthly_payment_text,
        amortization=plan.amortization_text,
        total_investment=plan.total_investment,
        notes=plan.notes,
        payment_method=payment_method.label if payment_method else None,
        number_of_installments=installments if payment_method else None,
    )


def monthly_payment_display(selection: PlanSelection) -> str:
    """
    Texto de cuota exibido no formulário.
    A Fiordo mostra a mensagem dos 4 primeiros meses quando o texto
    do plano não está no formato "€/mes".
    """
    if selection.id == PlanVariant.FIORDO.plan.id and "€/mes" not in selection.monthly_payment:
        return FIORDO_MONTHLY_PAYMENT_MESSAGE
    return selection.monthly_payment


@dataclass(frozen=True)
class InvestmentRecovery:
    days: int
    months: str
    net_daily_salary: str


def net_daily_salary() -> float:
    return NET_MONTHLY_SALARY / WORKING_DAYS_PER_MONTH


def estimate_investment_recovery(total_investment: Optional[float]) -> Optional[InvestmentRecovery]:
    """
    Estima quantos dias de trabalho na Noruega pagam o investimento.
    Retorna None quando não há investimento inicial.
    """
    if not total_investment:
        return None

    daily = net_daily_salary()
    days = math.ceil(total_investment / daily)
    return InvestmentRecovery(
        days=days,
        months=f"{days / WORKING_DAYS_PER_MONTH:.1f}",
        net_daily_salary=format_number_es(daily, decimals=2),
    )
