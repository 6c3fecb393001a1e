"""
供应商评价模块 - 业务逻辑服务层
提供评价提交与最近评价查询
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping

from supplier_eval.rubric import Rubric
from supplier_eval.scoring import build_draft
from supplier_eval.store import EvaluationStore, EvaluationSummary

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 100


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    evaluation_id: int
    total_score: Decimal


class EvaluationRecordService:
    """
    评价记录服务

    存储和量表均由调用方注入，服务本身不持有全局状态。
    每次提交生成一条新记录（不去重、不支持修改和删除）。
    """

    def __init__(self, store: EvaluationStore, rubric: Rubric, max_recent: int = DEFAULT_RECENT_LIMIT):
        self.store = store
        self.rubric = rubric
        self.max_recent = max_recent

    def submit(self, raw_fields: Mapping) -> SubmissionResult:
        """
        提交一份评价

        Args:
            raw_fields: 前端提交的 data 对象，包含 category / subCategory /
                supplierName / month 以及各题目得分

        Returns:
            SubmissionResult: 成功标记、记录ID、总分

        Raises:
            MalformedInputError: raw_fields 不是字典
            MissingFieldError: 缺少品类、供应商名称或评价月份
            StoreUnavailableError: 存储写入失败
        """
        draft = build_draft(raw_fields, self.rubric.score_fields)
        evaluation_id = self.store.insert_record(draft)

        logger.info(
            f"评价已提交: id={evaluation_id} 供应商={draft.supplier_name} "
            f"月份={draft.evaluation_month} 总分={draft.total_score}"
        )
        return SubmissionResult(success=True, evaluation_id=evaluation_id, total_score=draft.total_score)

    def list_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[EvaluationSummary]:
        """
        按创建时间倒序获取最近评价，条数限制在 1 ~ max_recent 之间

        Raises:
            StoreUnavailableError: 存储查询失败（不返回部分数据）
        """
        limit = max(1, min(limit, self.max_recent))
        return self.store.list_recent(limit)


def get_evaluation_service() -> EvaluationRecordService:
    """使用启动时构建的存储和量表创建评价服务"""
    from django.apps import apps
    from supplier_eval.apps import get_app_settings

    app_config = apps.get_app_config('supplier_eval')
    return EvaluationRecordService(
        store=app_config.store,
        rubric=app_config.rubric,
        max_recent=get_app_settings().get('RECENT_LIMIT', DEFAULT_RECENT_LIMIT),
    )
