"""
评价记录服务与存储单元测试
"""
from decimal import Decimal
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.test import SimpleTestCase, TestCase

from supplier_eval.exceptions import MalformedInputError, MissingFieldError, StoreUnavailableError
from supplier_eval.models import ImmutableRecordError, SupplierEvaluation
from supplier_eval.rubric import get_rubric
from supplier_eval.services import EvaluationRecordService, get_evaluation_service
from supplier_eval.store import DjangoEvaluationStore, InMemoryEvaluationStore
from supplier_eval.tests.factories import make_submission


class EvaluationSubmitTests(TestCase):
    """评价提交测试"""

    def setUp(self):
        self.service = EvaluationRecordService(DjangoEvaluationStore(), get_rubric())

    def test_submit_persists_record(self):
        result = self.service.submit(make_submission(portfolio_diversity=3, credit_term=2))

        self.assertTrue(result.success)
        self.assertEqual(result.total_score, Decimal('5'))

        record = SupplierEvaluation.objects.get(pk=result.evaluation_id)
        self.assertEqual(record.category, 'RM')
        self.assertEqual(record.sub_category, 'Dairy')
        self.assertEqual(record.supplier_name, 'Schreiber')
        self.assertEqual(record.evaluation_month, '2025-03')
        self.assertEqual(record.portfolio_diversity, Decimal('3.00'))
        self.assertEqual(record.total_score, Decimal('5.00'))

    def test_stored_total_matches_all_score_fields(self):
        """数据库生成列总分 = 16道题目最高分 + 2个隐藏字段"""
        rubric = get_rubric()
        raw = make_submission(labelling_rating='1.5', supplier_quality='2.5')
        for question in rubric.questions:
            raw[question.key] = str(question.max_score)

        result = self.service.submit(raw)
        record = SupplierEvaluation.objects.get(pk=result.evaluation_id)

        self.assertEqual(result.total_score, Decimal('109'))
        self.assertEqual(record.total_score, Decimal('109.00'))
        self.assertEqual(record.total_score, sum(record.get_scores().values()))

    def test_non_numeric_score_is_stored_as_zero(self):
        result = self.service.submit(make_submission(credit_term='n/a', sdp_rating='10'))
        record = SupplierEvaluation.objects.get(pk=result.evaluation_id)

        self.assertEqual(record.credit_term, Decimal('0'))
        self.assertEqual(record.total_score, Decimal('10.00'))

    def test_missing_field_writes_nothing(self):
        raw = make_submission()
        del raw['month']

        with self.assertRaises(MissingFieldError):
            self.service.submit(raw)
        self.assertEqual(SupplierEvaluation.objects.count(), 0)

    def test_identical_submissions_create_distinct_records(self):
        """重复提交不去重"""
        first = self.service.submit(make_submission(cost_model=5))
        second = self.service.submit(make_submission(cost_model=5))

        self.assertNotEqual(first.evaluation_id, second.evaluation_id)
        self.assertEqual(SupplierEvaluation.objects.count(), 2)

    def test_store_failure_raises_and_writes_nothing(self):
        with patch.object(SupplierEvaluation, 'save', side_effect=OperationalError('database is locked')):
            with self.assertRaises(StoreUnavailableError):
                self.service.submit(make_submission())
        self.assertEqual(SupplierEvaluation.objects.count(), 0)

    def test_text_fields_are_cleaned(self):
        result = self.service.submit(make_submission(supplierName='Parag  Milk\nFoods', category='R' * 80))
        record = SupplierEvaluation.objects.get(pk=result.evaluation_id)

        self.assertEqual(record.supplier_name, 'Parag Milk Foods')
        self.assertEqual(len(record.category), 50)

    def test_date_time_month_is_stored_intact(self):
        result = self.service.submit(make_submission(month=' 2025-03-15T00:00 '))
        record = SupplierEvaluation.objects.get(pk=result.evaluation_id)
        self.assertEqual(record.evaluation_month, '2025-03-15T00:00')

    def test_scores_at_precision_limit(self):
        """字段精度边界：9999.99 原样入库，舍入到 10000.00 的按0分入库"""
        test_cases = [
            ('9999.99', Decimal('9999.99')),
            ('9999.994', Decimal('9999.99')),
            ('9999.995', Decimal('0')),
            ('-9999.995', Decimal('0')),
        ]
        for value, expected in test_cases:
            with self.subTest(value=value):
                result = self.service.submit(make_submission(credit_term=value))
                record = SupplierEvaluation.objects.get(pk=result.evaluation_id)

                self.assertEqual(result.total_score, expected)
                self.assertEqual(record.credit_term, expected)
                self.assertEqual(record.total_score, expected)

    def test_model_validation_failure_is_malformed_input(self):
        error = ValidationError({'credit_term': ['Ensure that there are no more than 6 digits in total.']})
        with patch.object(SupplierEvaluation, 'full_clean', side_effect=error):
            with self.assertRaises(MalformedInputError):
                self.service.submit(make_submission())
        self.assertEqual(SupplierEvaluation.objects.count(), 0)


class EvaluationListTests(TestCase):
    """最近评价查询测试"""

    def setUp(self):
        self.service = EvaluationRecordService(DjangoEvaluationStore(), get_rubric())

    def test_newest_first(self):
        ids = [self.service.submit(make_submission(supplierName=f'Supplier {i}')).evaluation_id for i in range(3)]

        records = self.service.list_recent()
        self.assertEqual([r.id for r in records], list(reversed(ids)))
        self.assertEqual(records[0].supplier_name, 'Supplier 2')

    def test_capped_at_one_hundred(self):
        for i in range(105):
            self.service.submit(make_submission(sdp_rating=5))

        records = self.service.list_recent()
        self.assertEqual(len(records), 100)
        self.assertEqual(len(self.service.list_recent(1000)), 100)

    def test_limit_is_clamped(self):
        for i in range(5):
            self.service.submit(make_submission())

        self.assertEqual(len(self.service.list_recent(3)), 3)
        self.assertEqual(len(self.service.list_recent(0)), 1)
        self.assertEqual(len(self.service.list_recent(-5)), 1)

    def test_summary_fields(self):
        self.service.submit(make_submission(cost_model=10, legal_contracts='4.5'))

        summary = self.service.list_recent()[0]
        data = summary.to_dict()
        self.assertEqual(set(data), {'id', 'supplierName', 'evaluationMonth', 'totalScore', 'createdAt'})
        self.assertEqual(data['totalScore'], 14.5)
        self.assertEqual(summary.total_score, Decimal('14.50'))

    def test_query_failure_raises(self):
        with patch.object(SupplierEvaluation, 'objects') as mock_manager:
            mock_manager.using.side_effect = OperationalError('no such table')
            with self.assertRaises(StoreUnavailableError):
                self.service.list_recent()

    def test_app_service_uses_startup_components(self):
        service = get_evaluation_service()
        self.assertIs(service.rubric, get_rubric())
        self.assertIsInstance(service.store, DjangoEvaluationStore)
        self.assertEqual(service.max_recent, 100)


class ImmutableRecordTests(TestCase):
    """评价记录创建后不可修改、不可删除"""

    def setUp(self):
        service = EvaluationRecordService(DjangoEvaluationStore(), get_rubric())
        evaluation_id = service.submit(make_submission()).evaluation_id
        self.record = SupplierEvaluation.objects.get(pk=evaluation_id)

    def test_update_is_rejected(self):
        self.record.cost_model = Decimal('10')
        with self.assertRaises(ImmutableRecordError):
            self.record.save()
        self.assertEqual(SupplierEvaluation.objects.get(pk=self.record.pk).cost_model, Decimal('0'))

    def test_delete_is_rejected(self):
        with self.assertRaises(ImmutableRecordError):
            self.record.delete()
        self.assertTrue(SupplierEvaluation.objects.filter(pk=self.record.pk).exists())


class InMemoryStoreServiceTests(SimpleTestCase):
    """服务与存储实现解耦：内存存储"""

    def setUp(self):
        self.store = InMemoryEvaluationStore()
        self.service = EvaluationRecordService(self.store, get_rubric(), max_recent=2)

    def test_submit_and_list(self):
        first = self.service.submit(make_submission(supplierName='Govind', credit_term=3))
        second = self.service.submit(make_submission(supplierName='Modern Dairies', cost_model=10))
        third = self.service.submit(make_submission(supplierName='Schreiber'))

        self.assertEqual([first.evaluation_id, second.evaluation_id, third.evaluation_id], [1, 2, 3])

        records = self.service.list_recent()
        self.assertEqual([r.id for r in records], [3, 2])
        self.assertEqual(records[1].total_score, Decimal('10'))

    def test_connection_check(self):
        self.assertIsNone(self.store.check_connection())
