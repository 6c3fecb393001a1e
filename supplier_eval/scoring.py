"""
供应商评价模块 - 评分解析与汇总

分值一律使用 Decimal 精确计算，避免大量0.5分累加时的浮点误差。
评分解析规则：缺失、空值、非数字、非有限数、布尔值、超出字段精度的值均按0分处理，
不拒绝提交（与历史前端行为保持一致）。
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping

from supplier_eval.exceptions import MalformedInputError, MissingFieldError

ZERO = Decimal('0.00')
SCORE_QUANTUM = Decimal('0.01')
# 单项分值字段为 DecimalField(max_digits=6, decimal_places=2)
SCORE_LIMIT = Decimal('10000')

# 提交字段名 -> 记录字段名
IDENTITY_FIELDS = {
    'category': 'category',
    'subCategory': 'sub_category',
    'supplierName': 'supplier_name',
    'month': 'evaluation_month',
}
REQUIRED_FIELDS = ('category', 'supplierName', 'month')


def parse_score(value) -> Decimal:
    """
    将提交的分值转换为 Decimal（保留2位小数）

    无法解析的输入返回 0，不抛出异常

    >>> parse_score('4.5')
    Decimal('4.50')
    >>> parse_score('abc')
    Decimal('0.00')
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return ZERO

    try:
        score = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO

    if not score.is_finite() or abs(score) >= SCORE_LIMIT:
        return ZERO

    # 舍入后再比较一次上限，9999.995 舍入后为 10000.00，超出字段精度
    score = score.quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)
    if abs(score) >= SCORE_LIMIT:
        return ZERO
    return score


def compute_total(scores: Iterable[Decimal]) -> Decimal:
    """各项分值求和"""
    return sum(scores, ZERO)


def _clean_text(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


@dataclass(frozen=True)
class EvaluationDraft:
    """校验后待入库的评价记录"""
    category: str
    sub_category: str
    supplier_name: str
    evaluation_month: str
    scores: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def total_score(self) -> Decimal:
        return compute_total(self.scores.values())

    def as_record_fields(self) -> Dict:
        """转换为模型字段字典（不含 total_score，由数据库生成列计算）"""
        fields = {
            'category': self.category,
            'sub_category': self.sub_category,
            'supplier_name': self.supplier_name,
            'evaluation_month': self.evaluation_month,
        }
        fields.update(self.scores)
        return fields


def build_draft(raw_fields: Mapping, score_fields: Iterable[str]) -> EvaluationDraft:
    """
    校验提交数据并构建评价草稿

    Args:
        raw_fields: 前端提交的 data 对象
        score_fields: 参与计分的字段（量表题目 + 隐藏字段）

    Raises:
        MalformedInputError: raw_fields 不是字典
        MissingFieldError: 品类、供应商名称或评价月份为空
    """
    if not isinstance(raw_fields, Mapping):
        raise MalformedInputError()

    for name in REQUIRED_FIELDS:
        if not _clean_text(raw_fields.get(name)):
            raise MissingFieldError(name)

    identity = {
        record_name: _clean_text(raw_fields.get(name))
        for name, record_name in IDENTITY_FIELDS.items()
    }
    scores = {name: parse_score(raw_fields.get(name)) for name in score_fields}

    return EvaluationDraft(scores=scores, **identity)
