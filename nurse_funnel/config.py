from dataclasses import dataclass
import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """
    Configurações principais da aplicação.

    Segue a ideia de centralizar parâmetros críticos
    para facilitar revisão, testes e mudanças futuras.
    """
    database_url: str = "sqlite:///./leads.db"
    env: str = "dev"  # "dev" ou "prod"
    admin_api_key: str = ""
    redis_url: str = ""
    notice_ttl_seconds: int = 600  # quanto tempo um aviso pendente fica guardado
    booking_url: str = "https://calendly.com/amanda-globalworking"
    instagram_url: str = "https://www.instagram.com/globalworking/"

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Carrega configuração a partir de variáveis de ambiente.
        Primeiro tenta carregar do arquivo .env, depois do ambiente do sistema.
        Levanta erro explícito se algo crítico faltar.
        """
        # Carrega variáveis do arquivo .env se existir
        load_dotenv()

        database_url = os.getenv("DATABASE_URL", "sqlite:///./leads.db")
        # Alguns provedores ainda entregam o esquema antigo "postgres://"
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)

        admin_api_key = os.getenv("ADMIN_API_KEY", "")
        redis_url = os.getenv("REDIS_URL", "")

        env = os.getenv("ENV", "dev").lower()
        if env not in ("dev", "prod"):
            logger.warning(f"ENV inválido '{env}', usando 'dev' como padrão")
            env = "dev"

        # Validação: em produção, ADMIN_API_KEY é obrigatório
        if env == "prod":
            if not admin_api_key or not admin_api_key.strip():
                raise RuntimeError(
                    "ENV=prod requer ADMIN_API_KEY definida. "
                    "Configure ADMIN_API_KEY no ambiente de produção."
                )
            logger.info("Modo PRODUÇÃO: ADMIN_API_KEY validada")
        else:
            if not admin_api_key or not admin_api_key.strip():
                logger.warning(
                    "⚠️  MODO DEV: ADMIN_API_KEY não configurada. "
                    "O painel /admin e a API /api/* aceitarão requisições sem autenticação. "
                    "Configure ADMIN_API_KEY para produção."
                )

        notice_ttl_seconds = int(os.getenv("NOTICE_TTL_SECONDS", "600"))
        booking_url = os.getenv("BOOKING_URL", "https://calendly.com/amanda-globalworking")
        instagram_url = os.getenv("INSTAGRAM_URL", "https://www.instagram.com/globalworking/")

        return cls(
            database_url=database_url,
            env=env,
            admin_api_key=admin_api_key,
            redis_url=redis_url,
            notice_ttl_seconds=notice_ttl_seconds,
            booking_url=booking_url,
            instagram_url=instagram_url,
        )
