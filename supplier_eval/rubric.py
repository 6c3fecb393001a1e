"""
供应商评价模块 - 评分量表
从YAML配置加载评分题目和供应商清单，进程启动时构建一次，之后只读
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_RUBRIC_PATH = Path(__file__).parent / 'config' / 'rubric.yml'


class RubricConfigError(ValueError):
    """量表配置文件无效"""


@dataclass(frozen=True)
class Choice:
    """单个选项：分值 + 说明"""
    score: Decimal
    label: str


@dataclass(frozen=True)
class Question:
    """评分题目，choices 保持配置文件中的顺序"""
    key: str
    display_label: str
    choices: Tuple[Choice, ...]

    @property
    def max_score(self) -> Decimal:
        return max(choice.score for choice in self.choices)

    def to_dict(self) -> Dict:
        return {
            'key': self.key,
            'label': self.display_label,
            'choices': [
                {'score': float(choice.score), 'label': choice.label}
                for choice in self.choices
            ],
        }


@dataclass(frozen=True)
class Rubric:
    """
    评分量表

    - questions: 表单展示的题目（有序）
    - hidden_score_fields: 入库但不展示的评分字段
    - categories: 品类 -> 子品类
    - suppliers: 子品类 -> 供应商名称
    """
    questions: Tuple[Question, ...]
    hidden_score_fields: Tuple[str, ...] = ()
    categories: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    suppliers: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()

    @property
    def question_keys(self) -> Tuple[str, ...]:
        return tuple(question.key for question in self.questions)

    @property
    def score_fields(self) -> Tuple[str, ...]:
        """参与总分计算的全部字段：题目字段在前，隐藏字段在后"""
        return self.question_keys + self.hidden_score_fields

    def get_questions(self, category: Optional[str] = None,
                      sub_category: Optional[str] = None) -> Tuple[Question, ...]:
        """
        获取指定品类/子品类需要展示的题目

        所有品类共用同一套题目，参数保留用于接口一致
        """
        return self.questions

    def get_question(self, key: str) -> Optional[Question]:
        for question in self.questions:
            if question.key == key:
                return question
        return None

    def get_category_names(self) -> List[str]:
        return [name for name, _ in self.categories]

    def get_sub_categories(self, category: Optional[str]) -> List[str]:
        """品类下的子品类，未知品类返回空列表"""
        for name, sub_categories in self.categories:
            if name == category:
                return list(sub_categories)
        return []

    def get_suppliers(self, sub_category: Optional[str]) -> List[str]:
        """子品类下的供应商清单，未知子品类返回空列表（不视为错误）"""
        for name, supplier_names in self.suppliers:
            if name == sub_category:
                return list(supplier_names)
        return []

    def max_total_score(self) -> Decimal:
        """各题最高分之和（仅用于页面展示满分）"""
        return sum((question.max_score for question in self.questions), Decimal('0'))


def _parse_choice_score(value, question_key: str) -> Decimal:
    if isinstance(value, bool):
        raise RubricConfigError(f"题目 '{question_key}' 的选项分值必须是数字: {value!r}")
    try:
        score = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise RubricConfigError(f"题目 '{question_key}' 的选项分值必须是数字: {value!r}")
    if not score.is_finite():
        raise RubricConfigError(f"题目 '{question_key}' 的选项分值必须是有限数字: {value!r}")
    return score


def _build_question(config: Dict) -> Question:
    if not isinstance(config, dict):
        raise RubricConfigError(f"题目配置必须是字典类型: {config!r}")

    key = config.get('key')
    if not key:
        raise RubricConfigError(f"题目缺少 'key': {config!r}")

    choices_config = config.get('choices') or []
    if not choices_config:
        raise RubricConfigError(f"题目 '{key}' 至少需要一个选项")

    choices = []
    for item in choices_config:
        if not isinstance(item, dict):
            raise RubricConfigError(f"题目 '{key}' 的选项必须是字典类型: {item!r}")
        choices.append(Choice(
            score=_parse_choice_score(item.get('score'), key),
            label=str(item.get('label', '')),
        ))
    choices = tuple(choices)
    return Question(key=str(key), display_label=str(config.get('label') or key), choices=choices)


def build_rubric(config: Dict) -> Rubric:
    """
    根据配置字典构建量表

    Raises:
        RubricConfigError: 配置无效时抛出
    """
    if not config:
        raise RubricConfigError("量表配置为空")

    if 'questions' not in config:
        raise RubricConfigError("配置缺少 'questions' 节点")

    questions_config = config['questions']
    if not isinstance(questions_config, list) or not questions_config:
        raise RubricConfigError("'questions' 必须是非空列表")

    questions = tuple(_build_question(item) for item in questions_config)
    hidden_fields = tuple(str(name) for name in (config.get('hidden_score_fields') or []))

    seen = set()
    for key in [question.key for question in questions] + list(hidden_fields):
        if key in seen:
            raise RubricConfigError(f"评分字段重复: {key}")
        seen.add(key)

    categories = tuple(
        (str(name), tuple(str(sub) for sub in (subs or [])))
        for name, subs in (config.get('categories') or {}).items()
    )
    suppliers = tuple(
        (str(name), tuple(str(supplier) for supplier in (names or [])))
        for name, names in (config.get('suppliers') or {}).items()
    )

    return Rubric(
        questions=questions,
        hidden_score_fields=hidden_fields,
        categories=categories,
        suppliers=suppliers,
    )


def load_rubric(path: Optional[Path] = None) -> Rubric:
    """
    从YAML文件加载量表

    Args:
        path: 配置文件路径，默认为 supplier_eval/config/rubric.yml
    """
    config_path = Path(path) if path else DEFAULT_RUBRIC_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)

    rubric = build_rubric(config)
    logger.info(f"评分量表加载完成: {len(rubric.questions)} 道题目, 配置文件 {config_path}")
    return rubric


def get_rubric() -> Rubric:
    """获取启动时构建的量表实例"""
    from django.apps import apps
    return apps.get_app_config('supplier_eval').rubric
