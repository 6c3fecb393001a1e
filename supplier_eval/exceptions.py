"""
供应商评价模块 - 异常定义
视图层根据 status_code 直接生成 {"success": false, "message": ...} 响应
"""


class EvaluationError(Exception):
    """评价业务异常基类"""

    status_code = 400
    default_message = 'Evaluation request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFieldError(EvaluationError):
    """必填的标识字段缺失（品类、供应商、评价月份）"""

    status_code = 400

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f'Missing required field: {field}')


class MalformedInputError(EvaluationError):
    """
    请求体结构不合法（非JSON、缺少 data 对象），或记录未通过模型校验

    注意：评分字段无法解析时不抛出此异常，而是按0分处理，见 scoring.parse_score
    """

    status_code = 400
    default_message = 'Request body must be a JSON object with a "data" object'


class StoreUnavailableError(EvaluationError):
    """评价存储不可用（连接失败或查询失败）"""

    status_code = 500
    default_message = 'Evaluation store is unavailable'
