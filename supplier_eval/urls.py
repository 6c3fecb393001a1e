"""
供应商评价模块 - URL路由配置
API路径同时兼容带/不带结尾斜杠
"""
from django.urls import path, re_path
from supplier_eval import views

app_name = 'supplier_eval'

urlpatterns = [
    # 评价表单页面
    path('', views.evaluation_form, name='evaluation_form'),

    # 评价提交与最近评价查询
    re_path(r'^api/evaluations/?$', views.evaluations_api, name='evaluations_api'),

    # 量表与供应商下拉数据
    re_path(r'^api/rubric/?$', views.rubric_api, name='rubric_api'),
    re_path(r'^api/suppliers/?$', views.suppliers_api, name='suppliers_api'),

    # 健康检查
    re_path(r'^api/health/?$', views.health_api, name='health_api'),
]
