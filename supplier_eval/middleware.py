"""
评价服务请求监控中间件

功能：
1. 响应头 X-Response-Time 记录请求耗时
2. 5xx 响应记录错误日志（存储不可用时API返回500 JSON，不经过异常流程）
3. 超过 SLOW_REQUEST_THRESHOLD 的请求记录慢请求警告
4. /api/ 下的请求按状态码记录访问日志（INFO）
"""
import logging
import time

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger('performance')

API_PREFIX = '/api/'


def _slow_request_threshold():
    return getattr(settings, 'SUPPLIER_EVAL_CONFIG', {}).get('SLOW_REQUEST_THRESHOLD', 1.0)


class RequestTimingMiddleware(MiddlewareMixin):
    """请求耗时与状态监控"""

    def process_request(self, request):
        request._start_time = time.monotonic()
        return None

    def process_response(self, request, response):
        start_time = getattr(request, '_start_time', None)
        if start_time is None:
            return response

        duration = time.monotonic() - start_time
        response['X-Response-Time'] = f'{duration:.3f}s'

        summary = f'{request.method} {request.path} 状态 {response.status_code} 耗时 {duration:.2f}秒'
        if response.status_code >= 500:
            logger.error(f'服务端错误: {summary}')
        elif duration > _slow_request_threshold():
            logger.warning(f'慢请求警告: {summary}')
        elif request.path.startswith(API_PREFIX):
            logger.info(f'API请求: {summary}')

        return response

    def process_exception(self, request, exception):
        start_time = getattr(request, '_start_time', None)
        if start_time is not None:
            logger.error(
                f'请求异常: {request.method} {request.path} '
                f'耗时 {time.monotonic() - start_time:.2f}秒 - {exception}'
            )
        return None
