"""
测试数据构造
"""
from supplier_eval.models import QUESTION_SCORE_FIELDS


def make_submission(**overrides):
    """构造一份各题均为0分的评价提交数据"""
    data = {
        'category': 'RM',
        'subCategory': 'Dairy',
        'supplierName': 'Schreiber',
        'month': '2025-03',
    }
    data.update({name: '0' for name in QUESTION_SCORE_FIELDS})
    data.update(overrides)
    return data
