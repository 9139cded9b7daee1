import logging
from dataclasses import dataclass
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """
    Aviso exibido uma única vez ao visitante depois de um redirect
    (ex: "¡Solicitud enviada!").
    """
    title: str
    description: str
    variant: str = "default"  # "default" ou "destructive"


class InMemoryNoticeStore:
    """
    Fila de avisos por visitante, guardada em memória.
    Em produção com mais de um processo, use o RedisNoticeStore.
    """

    def __init__(self) -> None:
        self._notices: Dict[str, List[Notice]] = {}

    def push(self, visitor_id: str, notice: Notice) -> None:
        self._notices.setdefault(visitor_id, []).append(notice)
        logger.debug(f"Aviso enfileirado: visitor_id={visitor_id}, title={notice.title}")

    def pop_all(self, visitor_id: str) -> List[Notice]:
        """Retorna e remove todos os avisos pendentes do visitante."""
        return self._notices.pop(visitor_id, [])
