"""
供应商评价模块 - 评价存储

业务层只依赖 EvaluationStore 接口（新增记录、查询最近记录、连通性检查），
切换 SQLite / MySQL / PostgreSQL 等存储引擎不影响评价服务。
"""
import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List

from django.core.exceptions import ValidationError
from django.db import DatabaseError, connections, transaction
from django.utils import timezone

from supplier_eval.exceptions import MalformedInputError, StoreUnavailableError
from supplier_eval.scoring import EvaluationDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationSummary:
    """最近评价列表中的一行"""
    id: int
    supplier_name: str
    evaluation_month: str
    total_score: Decimal
    created_at: datetime

    def to_dict(self):
        return {
            'id': self.id,
            'supplierName': self.supplier_name,
            'evaluationMonth': self.evaluation_month,
            'totalScore': float(self.total_score),
            'createdAt': self.created_at.isoformat(),
        }


class EvaluationStore:
    """评价存储接口"""

    def insert_record(self, draft: EvaluationDraft) -> int:
        """新增一条评价记录，返回记录ID"""
        raise NotImplementedError

    def list_recent(self, limit: int) -> List[EvaluationSummary]:
        """按创建时间倒序返回最近的评价记录"""
        raise NotImplementedError

    def check_connection(self) -> None:
        """检查存储是否可用，不可用时抛出 StoreUnavailableError"""
        raise NotImplementedError


class DjangoEvaluationStore(EvaluationStore):
    """基于 Django ORM 的评价存储"""

    def __init__(self, using: str = 'default'):
        self.using = using

    def insert_record(self, draft: EvaluationDraft) -> int:
        from supplier_eval.models import SupplierEvaluation

        try:
            with transaction.atomic(using=self.using):
                record = SupplierEvaluation(**draft.as_record_fields())
                record.save(using=self.using)
        except ValidationError as e:
            logger.warning(f"评价记录校验失败: {draft.supplier_name} {draft.evaluation_month} {e.messages}")
            raise MalformedInputError('Evaluation contains values that cannot be stored') from e
        except DatabaseError as e:
            logger.exception(f"评价记录写入失败: {draft.supplier_name} {draft.evaluation_month}")
            raise StoreUnavailableError('Failed to save evaluation') from e
        return record.pk

    def list_recent(self, limit: int) -> List[EvaluationSummary]:
        from supplier_eval.models import SupplierEvaluation

        try:
            rows = list(
                SupplierEvaluation.objects.using(self.using)
                .order_by('-created_at', '-id')
                .values('id', 'supplier_name', 'evaluation_month', 'total_score', 'created_at')[:limit]
            )
        except DatabaseError as e:
            logger.exception("最近评价记录查询失败")
            raise StoreUnavailableError('Failed to load evaluations') from e
        return [EvaluationSummary(**row) for row in rows]

    def check_connection(self) -> None:
        connection = connections[self.using]
        try:
            connection.ensure_connection()
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
        except DatabaseError as e:
            raise StoreUnavailableError(f'Database "{self.using}" is unavailable: {e}') from e


class InMemoryEvaluationStore(EvaluationStore):
    """内存评价存储（测试及无数据库演示使用）"""

    def __init__(self):
        self._records = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert_record(self, draft: EvaluationDraft) -> int:
        with self._lock:
            record_id = next(self._ids)
            self._records.append(EvaluationSummary(
                id=record_id,
                supplier_name=draft.supplier_name,
                evaluation_month=draft.evaluation_month,
                total_score=draft.total_score,
                created_at=timezone.now(),
            ))
        return record_id

    def list_recent(self, limit: int) -> List[EvaluationSummary]:
        with self._lock:
            records = sorted(self._records, key=lambda r: (r.created_at, r.id), reverse=True)
        return records[:limit]

    def check_connection(self) -> None:
        return None
