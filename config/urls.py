"""
URL configuration for supplier_evaluation project.
"""
from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),

    # OpenAPI schema & Swagger 文档
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path(
        'api/docs/',
        SpectacularSwaggerView.as_view(url_name='schema'),
        name='api_docs',
    ),

    # 供应商评价（表单页面 + API）
    path('', include('supplier_eval.urls')),
]

# 自定义Admin站点标题（从settings集中配置，避免硬编码重复）
admin.site.site_header = getattr(settings, 'ADMIN_SITE_HEADER', 'Admin')
admin.site.site_title = getattr(settings, 'ADMIN_SITE_TITLE', 'Admin')
admin.site.index_title = getattr(settings, 'ADMIN_INDEX_TITLE', 'Site administration')
