"""
供应商绩效评价模块 - Admin后台配置
评价记录只追加，后台仅提供查看
"""
from django.contrib import admin
from django.utils.html import format_html
from django.utils.http import urlencode

from .models import QUESTION_SCORE_FIELDS, HIDDEN_SCORE_FIELDS, SupplierEvaluation


@admin.register(SupplierEvaluation)
class SupplierEvaluationAdmin(admin.ModelAdmin):
    """供应商绩效评价Admin配置（只读）"""

    # 列表页显示字段
    list_display = [
        'id',
        'supplier_name_link',
        'category',
        'sub_category',
        'evaluation_month',
        'total_score_badge',
        'created_at',
    ]

    # 搜索字段
    search_fields = [
        'supplier_name',
        'category',
        'sub_category',
        'evaluation_month',
    ]

    # 筛选器
    list_filter = [
        'category',
        'sub_category',
        'created_at',
    ]

    # 时间层级导航
    date_hierarchy = 'created_at'

    # 每页显示数量
    list_per_page = 50

    readonly_fields = [
        'category',
        'sub_category',
        'supplier_name',
        'evaluation_month',
        *QUESTION_SCORE_FIELDS,
        *HIDDEN_SCORE_FIELDS,
        'total_score',
        'created_at',
    ]

    # 字段集分组
    fieldsets = (
        ('基本信息', {
            'fields': (
                'category',
                'sub_category',
                'supplier_name',
                'evaluation_month',
            )
        }),
        ('量表得分', {
            'fields': QUESTION_SCORE_FIELDS,
        }),
        ('其他计分项', {
            'fields': HIDDEN_SCORE_FIELDS,
            'classes': ('collapse',),
        }),
        ('总分', {
            'fields': ('total_score',),
            'description': '总分 = 全部计分项之和（数据库生成列）',
        }),
        ('审计信息', {
            'fields': ('created_at',),
            'classes': ('collapse',),
        }),
    )

    def supplier_name_link(self, obj):
        """供应商名称链接"""
        if obj.supplier_name:
            # 链接到该供应商的所有评价
            url = '/admin/supplier_eval/supplierevaluation/?' + urlencode({'q': obj.supplier_name})
            return format_html(
                '<a href="{}">{}</a>',
                url,
                obj.supplier_name
            )
        return '-'
    supplier_name_link.short_description = '供应商名称'

    def total_score_badge(self, obj):
        """总分徽章"""
        return format_html(
            '<span style="background-color: #17a2b8; color: white; padding: 3px 8px; border-radius: 3px; font-weight: bold;">{}</span>',
            f'{float(obj.total_score):.2f}'
        )
    total_score_badge.short_description = '总分'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
