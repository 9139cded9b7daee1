"""
Fila de avisos usando Redis como backend.
Cada visitante tem uma lista JSON com TTL configurável.
"""
import logging
import json
from typing import List
from redis import Redis
from redis.exceptions import RedisError
from ..core.notices import Notice

logger = logging.getLogger(__name__)


class RedisNoticeStore:
    """
    Fila de avisos usando Redis.

    Armazena os avisos de cada visitante em uma lista: notices:{visitor_id}
    Com TTL configurável para expiração automática.
    """

    def __init__(self, redis_url: str, ttl_seconds: int = 600) -> None:
        """
        Inicializa a fila de avisos Redis.

        Args:
            redis_url: URL de conexão Redis (ex: redis://localhost:6379/0)
            ttl_seconds: TTL em segundos para avisos não lidos
        """
        self._redis = Redis.from_url(redis_url, decode_responses=False)
        self._ttl_seconds = ttl_seconds

        # Testar conexão
        try:
            self._redis.ping()
            logger.info(
                f"RedisNoticeStore inicializado: redis_url={redis_url}, ttl={ttl_seconds}s"
            )
        except RedisError as e:
            logger.error(f"Erro ao conectar ao Redis: {e}")
            raise

    @staticmethod
    def _key(visitor_id: str) -> str:
        return f"notices:{visitor_id}"

    def push(self, visitor_id: str, notice: Notice) -> None:
        data = json.dumps(
            {"title": notice.title, "description": notice.description, "variant": notice.variant},
            ensure_ascii=False,
        ).encode("utf-8")
        key = self._key(visitor_id)
        try:
            pipe = self._redis.pipeline()
            pipe.rpush(key, data)
            pipe.expire(key, self._ttl_seconds)
            pipe.execute()
            logger.debug(f"Aviso salvo no Redis: visitor_id={visitor_id}, title={notice.title}")
        except RedisError as e:
            # Avisos são best-effort: não quebrar o fluxo do formulário
            logger.error(f"Erro ao salvar aviso no Redis: visitor_id={visitor_id}, error={e}")

    def pop_all(self, visitor_id: str) -> List[Notice]:
        """
        Retorna e remove todos os avisos pendentes do visitante.
        """
        key = self._key(visitor_id)
        try:
            pipe = self._redis.pipeline()
            pipe.lrange(key, 0, -1)
            pipe.delete(key)
            raw_items, _ = pipe.execute()
        except RedisError as e:
            logger.error(f"Erro ao ler avisos do Redis: visitor_id={visitor_id}, error={e}")
            return []

        notices = []
        for raw in raw_items or []:
            item = json.loads(raw.decode("utf-8"))
            notices.append(
                Notice(
                    title=item["title"],
                    description=item["description"],
                    variant=item.get("variant", "default"),
                )
            )
        return notices
