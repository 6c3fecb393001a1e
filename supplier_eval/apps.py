from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def get_app_settings():
    """供应商评价模块配置（settings.SUPPLIER_EVAL_CONFIG）"""
    return getattr(settings, 'SUPPLIER_EVAL_CONFIG', {})


class SupplierEvalConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'supplier_eval'
    verbose_name = '供应商绩效评价'

    rubric = None
    store = None

    def ready(self):
        """启动时构建量表和评价存储，之后全程只读"""
        from supplier_eval.models import SCORE_FIELDS
        from supplier_eval.rubric import load_rubric
        from supplier_eval.store import DjangoEvaluationStore

        config = get_app_settings()
        self.rubric = load_rubric(config.get('RUBRIC_PATH'))

        unknown_fields = [name for name in self.rubric.score_fields if name not in SCORE_FIELDS]
        if unknown_fields:
            raise ImproperlyConfigured(f"量表中的评分字段在数据表中不存在: {', '.join(unknown_fields)}")

        self.store = DjangoEvaluationStore(using=config.get('DATABASE_ALIAS', 'default'))
