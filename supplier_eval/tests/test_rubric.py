"""
评分量表单元测试
"""
import tempfile
from dataclasses import FrozenInstanceError
from decimal import Decimal
from pathlib import Path

from django.test import SimpleTestCase

from supplier_eval.models import SCORE_FIELDS
from supplier_eval.rubric import RubricConfigError, build_rubric, get_rubric, load_rubric


class RubricLoadTests(SimpleTestCase):
    """默认量表加载测试"""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.rubric = load_rubric()

    def test_question_order(self):
        """题目顺序与配置文件一致"""
        self.assertEqual(self.rubric.question_keys, (
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
        ))

    def test_score_fields_include_hidden_fields(self):
        """计分字段 = 16道题目 + 2个隐藏字段"""
        self.assertEqual(len(self.rubric.score_fields), 18)
        self.assertEqual(self.rubric.hidden_score_fields, ('labelling_rating', 'supplier_quality'))
        self.assertEqual(set(self.rubric.score_fields), set(SCORE_FIELDS))

    def test_choice_order_is_preserved(self):
        """选项顺序保持配置原样，不按分值重排"""
        question = self.rubric.get_question('cost_competitiveness')
        self.assertEqual(
            [choice.label for choice in question.choices],
            ['Not competitive', 'Improvement needed', 'At par with market'],
        )
        self.assertEqual(
            [choice.score for choice in question.choices],
            [Decimal('0'), Decimal('5'), Decimal('10')],
        )

    def test_half_point_scores(self):
        question = self.rubric.get_question('capacity_utilisation')
        self.assertEqual(
            [choice.score for choice in question.choices],
            [Decimal('1.5'), Decimal('3.0'), Decimal('4.5')],
        )

    def test_every_question_has_choices(self):
        for question in self.rubric.questions:
            self.assertTrue(question.choices, question.key)

    def test_questions_shared_by_all_categories(self):
        self.assertEqual(self.rubric.get_questions('RM', 'Dairy'), self.rubric.questions)
        self.assertEqual(self.rubric.get_questions('PM', 'Packaging'), self.rubric.questions)

    def test_dairy_suppliers(self):
        """Dairy 子品类的供应商清单"""
        self.assertEqual(
            self.rubric.get_suppliers('Dairy'),
            ['Schreiber', 'Parag Milk Foods Pvt Ltd', 'Govind', 'Modern Dairies'],
        )

    def test_unknown_sub_category_returns_empty_list(self):
        """未知子品类返回空列表而不是报错"""
        self.assertEqual(self.rubric.get_suppliers('Electronics'), [])
        self.assertEqual(self.rubric.get_suppliers(''), [])
        self.assertEqual(self.rubric.get_suppliers(None), [])

    def test_sub_categories(self):
        self.assertEqual(self.rubric.get_category_names(), ['RM', 'PM'])
        self.assertEqual(self.rubric.get_sub_categories('RM'), ['Agri', 'Nutri', 'Dairy'])
        self.assertEqual(self.rubric.get_sub_categories('PM'), ['Packaging'])
        self.assertEqual(self.rubric.get_sub_categories('XX'), [])

    def test_max_total_score(self):
        self.assertEqual(self.rubric.max_total_score(), Decimal('105'))

    def test_rubric_is_immutable(self):
        with self.assertRaises(FrozenInstanceError):
            self.rubric.questions = ()
        with self.assertRaises(FrozenInstanceError):
            self.rubric.questions[0].key = 'changed'

    def test_returned_supplier_list_is_a_copy(self):
        suppliers = self.rubric.get_suppliers('Dairy')
        suppliers.append('Someone Else')
        self.assertEqual(len(self.rubric.get_suppliers('Dairy')), 4)

    def test_question_to_dict(self):
        data = self.rubric.get_question('advance_notice').to_dict()
        self.assertEqual(data, {
            'key': 'advance_notice',
            'label': 'Advance shipment notice',
            'choices': [{'score': 0.0, 'label': 'No'}, {'score': 3.0, 'label': 'Yes'}],
        })


class AppRubricTests(SimpleTestCase):
    """启动时构建的量表实例"""

    def test_get_rubric_returns_startup_instance(self):
        self.assertIs(get_rubric(), get_rubric())
        self.assertEqual(len(get_rubric().questions), 16)


class RubricConfigValidationTests(SimpleTestCase):
    """量表配置校验测试"""

    def _question(self, key='q1', choices=None):
        return {
            'key': key,
            'label': key.upper(),
            'choices': choices if choices is not None else [{'score': 1, 'label': 'One'}],
        }

    def test_empty_config(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({})
        with self.assertRaises(RubricConfigError):
            build_rubric(None)

    def test_missing_questions(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({'suppliers': {}})

    def test_question_without_choices(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({'questions': [self._question(choices=[])]})

    def test_duplicate_keys(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({'questions': [self._question('q1'), self._question('q1')]})

    def test_hidden_field_colliding_with_question(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({'questions': [self._question('q1')], 'hidden_score_fields': ['q1']})

    def test_non_numeric_score(self):
        with self.assertRaises(RubricConfigError):
            build_rubric({'questions': [self._question(choices=[{'score': 'high', 'label': 'High'}])]})
        with self.assertRaises(RubricConfigError):
            build_rubric({'questions': [self._question(choices=[{'score': True, 'label': 'Yes'}])]})

    def test_minimal_config(self):
        rubric = build_rubric({'questions': [self._question()]})
        self.assertEqual(rubric.question_keys, ('q1',))
        self.assertEqual(rubric.hidden_score_fields, ())
        self.assertEqual(rubric.get_suppliers('Dairy'), [])

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / 'rubric.yml'
            path.write_text(
                'questions:\n'
                '  - key: delivery\n'
                '    label: Delivery\n'
                '    choices:\n'
                '      - {score: 2.5, label: Late}\n'
                '      - {score: 1, label: Very late}\n'
                'suppliers:\n'
                '  Agri: [Farm Co]\n',
                encoding='utf-8',
            )
            rubric = load_rubric(path)

        question = rubric.get_question('delivery')
        self.assertEqual([c.score for c in question.choices], [Decimal('2.5'), Decimal('1')])
        self.assertEqual(rubric.get_suppliers('Agri'), ['Farm Co'])

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_rubric(Path('/nonexistent/rubric.yml'))
