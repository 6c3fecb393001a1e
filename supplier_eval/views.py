"""
供应商评价模块 - 视图层
提供评价表单页面、评价提交/查询API、量表与供应商查询API
"""
import logging

from django.http import QueryDict
from django.shortcuts import render
from django.views.decorators.http import require_http_methods
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import ParseError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from supplier_eval.exceptions import EvaluationError, MalformedInputError, StoreUnavailableError
from supplier_eval.rubric import get_rubric
from supplier_eval.services import DEFAULT_RECENT_LIMIT, get_evaluation_service

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    API统一异常处理，所有失败响应均为 {"success": false, "message": ...}
    """
    if isinstance(exc, EvaluationError):
        if exc.status_code >= 500:
            logger.error(f"评价API请求失败: {exc.message}")
        else:
            logger.warning(f"评价API请求无效: {exc.message}")
        return Response({'success': False, 'message': exc.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get('detail') if isinstance(response.data, dict) else None
        message = str(detail) if detail else str(exc)
        response.data = {'success': False, 'message': message}
    return response


def _get_limit(request, default=DEFAULT_RECENT_LIMIT):
    """解析条数限制，非法输入使用默认值"""
    try:
        return int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        return default


def _extract_submission(request):
    """
    从请求体中取出评价数据
    - JSON: {"data": {...}}
    - 表单提交: 字段直接平铺
    """
    try:
        payload = request.data
    except ParseError as e:
        raise MalformedInputError('Request body is not valid JSON') from e

    if isinstance(payload, QueryDict):
        if not payload:
            raise MalformedInputError()
        return payload.dict()

    if not isinstance(payload, dict):
        raise MalformedInputError()

    data = payload.get('data')
    if not isinstance(data, dict):
        raise MalformedInputError()
    return data


@extend_schema(
    methods=['GET'],
    summary="最近评价列表",
    description="按创建时间倒序返回最近的评价记录，最多100条。",
    parameters=[
        OpenApiParameter(
            name="limit",
            type=int,
            location=OpenApiParameter.QUERY,
            description="返回条数（1-100，默认100）",
            required=False,
        ),
    ],
    responses={200: OpenApiTypes.OBJECT, 500: OpenApiTypes.OBJECT},
    tags=["供应商评价"],
)
@extend_schema(
    methods=['POST'],
    summary="提交评价",
    description=(
        "提交一份供应商评价。请求体格式 {\"data\": {category, subCategory, supplierName, month, <题目key>: 分值}}。"
        "无法解析的分值按0分处理；缺少 category / supplierName / month 时返回400。"
    ),
    request=OpenApiTypes.OBJECT,
    responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT, 500: OpenApiTypes.OBJECT},
    tags=["供应商评价"],
)
@api_view(['GET', 'POST'])
def evaluations_api(request):
    """评价API - GET 查询最近评价，POST 提交评价"""
    service = get_evaluation_service()

    if request.method == 'POST':
        result = service.submit(_extract_submission(request))
        return Response({
            'success': result.success,
            'message': 'Evaluation submitted successfully',
            'evaluationId': result.evaluation_id,
            'totalScore': float(result.total_score),
        })

    records = service.list_recent(_get_limit(request))
    return Response({
        'success': True,
        'data': [record.to_dict() for record in records],
    })


@extend_schema(
    summary="评分量表",
    description="返回表单题目、隐藏计分字段、品类/子品类以及指定子品类下的供应商。",
    parameters=[
        OpenApiParameter(name="category", type=str, location=OpenApiParameter.QUERY, required=False),
        OpenApiParameter(name="subCategory", type=str, location=OpenApiParameter.QUERY, required=False),
    ],
    responses={200: OpenApiTypes.OBJECT},
    tags=["供应商评价"],
)
@api_view(['GET'])
def rubric_api(request):
    """评分量表API"""
    rubric = get_rubric()
    category = request.query_params.get('category', '')
    sub_category = request.query_params.get('subCategory', '')

    return Response({
        'success': True,
        'data': {
            'questions': [q.to_dict() for q in rubric.get_questions(category, sub_category)],
            'hiddenScoreFields': list(rubric.hidden_score_fields),
            'categories': rubric.get_category_names(),
            'subCategories': rubric.get_sub_categories(category),
            'suppliers': rubric.get_suppliers(sub_category),
            'maxTotalScore': float(rubric.max_total_score()),
        },
    })


@extend_schema(
    summary="子品类供应商",
    description="返回指定子品类下的供应商名称，未知子品类返回空列表。",
    parameters=[
        OpenApiParameter(name="subCategory", type=str, location=OpenApiParameter.QUERY, required=False),
    ],
    responses={200: OpenApiTypes.OBJECT},
    tags=["供应商评价"],
)
@api_view(['GET'])
def suppliers_api(request):
    """供应商下拉数据API"""
    sub_category = request.query_params.get('subCategory', '')
    return Response({'success': True, 'data': get_rubric().get_suppliers(sub_category)})


@extend_schema(
    summary="健康检查",
    responses={200: OpenApiTypes.OBJECT, 503: OpenApiTypes.OBJECT},
    tags=["运维"],
)
@api_view(['GET'])
def health_api(request):
    """存储连通性检查"""
    try:
        get_evaluation_service().store.check_connection()
    except StoreUnavailableError as e:
        logger.error(f"健康检查失败: {e.message}")
        return Response(
            {'success': False, 'message': e.message, 'database': 'unavailable'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({'success': True, 'database': 'ok'})


@require_http_methods(['GET'])
def evaluation_form(request):
    """
    评价表单页面

    题目和供应商下拉由量表渲染，页面下方展示最近的评价记录
    """
    rubric = get_rubric()
    load_error = ''
    try:
        recent_evaluations = get_evaluation_service().list_recent()
    except StoreUnavailableError as e:
        recent_evaluations = []
        load_error = e.message

    context = {
        'page_title': 'Supplier Performance Evaluation',
        'questions': rubric.get_questions(),
        'categories': [
            {'name': name, 'sub_categories': rubric.get_sub_categories(name)}
            for name in rubric.get_category_names()
        ],
        'supplier_options': {name: list(suppliers) for name, suppliers in rubric.suppliers},
        'max_total_score': rubric.max_total_score(),
        'recent_evaluations': recent_evaluations,
        'load_error': load_error,
    }
    return render(request, 'supplier_eval/evaluation_form.html', context)
