"""
Módulo de avisos por visitante.
Suporta tanto InMemoryNoticeStore quanto RedisNoticeStore.
"""

from .redis_notice_store import RedisNoticeStore
from ..core.notices import InMemoryNoticeStore, Notice

__all__ = ["RedisNoticeStore", "InMemoryNoticeStore", "Notice"]
