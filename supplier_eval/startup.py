"""
供应商评价模块 - 启动检查
服务启动前检查评价存储连通性，失败时按固定间隔重试有限次数
"""
import logging
import time

from supplier_eval.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def wait_for_store(store, attempts=3, delay=2.0, sleep=time.sleep):
    """
    检查存储连通性

    Args:
        store: EvaluationStore 实例
        attempts: 最大尝试次数
        delay: 两次尝试之间的等待秒数
        sleep: 等待函数（测试时可替换）

    Returns:
        bool: 存储是否可用
    """
    attempts = max(1, int(attempts))

    for attempt in range(attempts):
        try:
            store.check_connection()
            logger.info(f"评价存储连接成功 (尝试 {attempt + 1}/{attempts})")
            return True
        except StoreUnavailableError as e:
            logger.error(f"评价存储连接失败 (尝试 {attempt + 1}/{attempts}): {e.message}")

            if attempt < attempts - 1:
                logger.info(f"等待 {delay} 秒后重试...")
                sleep(delay)

    logger.error("达到最大重试次数，评价存储不可用")
    return False
