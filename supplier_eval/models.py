"""
供应商绩效评价模块 - 数据模型
"""
import operator
import re
from functools import reduce

from django.db import models

# 计分字段（表结构固定，量表配置中的字段必须全部包含在内）
QUESTION_SCORE_FIELDS = (
    'portfolio_diversity',
    'credit_term',
    'capacity_utilisation',
    'strategic_partnership',
    'business_etiquette',
    'inventory_carrying',
    'advance_notice',
    'knowledge_sharing',
    'legal_contracts',
    'cost_competitiveness',
    'cost_model',
    'sdp_rating',
    'quality_glo',
    'quality_gsqa_ing',
    'sc_notification',
    'supplier_audit',
)
HIDDEN_SCORE_FIELDS = (
    'labelling_rating',
    'supplier_quality',
)
SCORE_FIELDS = QUESTION_SCORE_FIELDS + HIDDEN_SCORE_FIELDS


def total_score_expression():
    """总分 = 全部计分字段之和（数据库生成列表达式）"""
    return reduce(operator.add, [models.F(name) for name in SCORE_FIELDS])


def _score_field(verbose_name):
    return models.DecimalField(verbose_name, max_digits=6, decimal_places=2, default=0)


class ImmutableRecordError(Exception):
    """评价记录只允许新增，不允许修改或删除"""


class AppendOnlyModel(models.Model):
    """
    只追加模型抽象基类
    - 创建时自动填充 created_at
    - 保存前清洗字符串字段并执行完整校验
    - 已存在的记录禁止再次保存或删除
    """

    created_at = models.DateTimeField('创建时间', auto_now_add=True, db_index=True, help_text='记录创建时自动填充')

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(f'{self._meta.verbose_name} 创建后不可修改')
        self._clean_string_fields()
        self.full_clean(exclude=self._generated_field_names())
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f'{self._meta.verbose_name} 不可删除')

    def _generated_field_names(self):
        return [field.name for field in self._meta.concrete_fields if getattr(field, 'generated', False)]

    def _clean_string_fields(self):
        """
        清洗所有字符串字段：
        1. 换行符替换为空格，合并连续空白
        2. 去除前后空白
        3. 超长内容按字段长度截断
        """
        for field in self._meta.concrete_fields:
            if not isinstance(field, (models.CharField, models.TextField)):
                continue
            value = getattr(self, field.attname, None)
            if not value or not isinstance(value, str):
                continue
            cleaned = re.sub(r'\s+', ' ', value).strip()
            if field.max_length and len(cleaned) > field.max_length:
                cleaned = cleaned[:field.max_length].rstrip()
            if cleaned != value:
                setattr(self, field.attname, cleaned)


class SupplierEvaluation(AppendOnlyModel):
    """供应商绩效评价 - 每次提交生成一条记录，总分由数据库生成列计算"""

    # ===== 评价对象 =====
    category = models.CharField('品类', max_length=50, db_index=True)
    sub_category = models.CharField('子品类', max_length=50, blank=True, db_index=True)
    supplier_name = models.CharField('供应商名称', max_length=200, db_index=True)
    evaluation_month = models.CharField(
        '评价月份',
        max_length=20,
        help_text='例如: 2025-03 或 2025-03-15'
    )

    # ===== 量表题目得分 =====
    portfolio_diversity = _score_field('Portfolio diversity')
    credit_term = _score_field('Credit Term offered')
    capacity_utilisation = _score_field('Capacity Outlook')
    strategic_partnership = _score_field('Strategic Partnership Score')
    business_etiquette = _score_field('Business Etiquette & Response Time')
    inventory_carrying = _score_field('Inventory carrying')
    advance_notice = _score_field('Advance shipment notice')
    knowledge_sharing = _score_field('Knowledge Sharing / Cont. Improvement Ideas')
    legal_contracts = _score_field('Legal contracts')
    cost_competitiveness = _score_field('Cost Competitiveness')
    cost_model = _score_field('Cost Model')
    sdp_rating = _score_field('SDP Rating')
    quality_glo = _score_field('Quality Performance Rating (GLO)')
    quality_gsqa_ing = _score_field('Quality Performance Rating (GSQA - ING)')
    sc_notification = _score_field('Supply Chain Notification')
    supplier_audit = _score_field('Supplier Surveillance Audit')

    # ===== 表单不展示的计分字段 =====
    labelling_rating = _score_field('Labelling rating')
    supplier_quality = _score_field('Supplier quality')

    # ===== 总分（生成列）=====
    total_score = models.GeneratedField(
        expression=total_score_expression(),
        output_field=models.DecimalField(max_digits=8, decimal_places=2),
        db_persist=True,
        verbose_name='总分',
    )

    class Meta:
        db_table = 'supplier_evaluations'
        verbose_name = '供应商绩效评价'
        verbose_name_plural = '供应商绩效评价'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.supplier_name} - {self.evaluation_month}"

    def get_scores(self):
        """各计分字段得分（按字段顺序）"""
        return {name: getattr(self, name) for name in SCORE_FIELDS}
