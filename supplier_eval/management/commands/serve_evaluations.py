from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError
from django.db import connections

from supplier_eval.apps import get_app_settings
from supplier_eval.services import get_evaluation_service
from supplier_eval.startup import wait_for_store


class Command(BaseCommand):
    help = (
        "检查评价存储连通性（有限次重试）后启动评价服务。"
        "存储不可用时按 FAIL_FAST_ON_STORE_UNAVAILABLE 配置决定终止启动或降级运行。"
    )

    def add_arguments(self, parser):
        config = get_app_settings()
        parser.add_argument(
            "addrport",
            nargs="?",
            default=config.get("LISTEN_ADDRESS", "0.0.0.0:3000"),
            help="监听地址（默认：0.0.0.0:3000）",
        )
        parser.add_argument(
            "--attempts",
            type=int,
            default=config.get("STARTUP_CONNECT_ATTEMPTS", 3),
            help="存储连通性检查的最大尝试次数（默认：3）",
        )
        parser.add_argument(
            "--delay",
            type=float,
            default=config.get("STARTUP_RETRY_DELAY", 2.0),
            help="两次尝试之间的等待秒数（默认：2）",
        )
        policy = parser.add_mutually_exclusive_group()
        policy.add_argument(
            "--fail-fast",
            dest="fail_fast",
            action="store_true",
            default=None,
            help="存储不可用时终止启动",
        )
        policy.add_argument(
            "--serve-degraded",
            dest="fail_fast",
            action="store_false",
            default=None,
            help="存储不可用时仍启动服务（API将返回500）",
        )
        parser.add_argument(
            "--check-only",
            action="store_true",
            help="仅执行连通性检查，不启动服务",
        )

    def handle(self, *args, **options):
        fail_fast = options["fail_fast"]
        if fail_fast is None:
            fail_fast = get_app_settings().get("FAIL_FAST_ON_STORE_UNAVAILABLE", True)

        store = get_evaluation_service().store
        available = wait_for_store(store, attempts=options["attempts"], delay=options["delay"])
        # 检查用的连接不带入服务进程
        for connection in connections.all(initialized_only=True):
            if not connection.in_atomic_block:
                connection.close()

        if available:
            self.stdout.write(self.style.SUCCESS("评价存储连接成功"))
        elif fail_fast:
            raise CommandError("评价存储不可用，服务启动终止")
        else:
            self.stdout.write(
                self.style.WARNING("评价存储不可用，服务以降级模式启动（提交与查询将返回错误）")
            )

        if options["check_only"]:
            return

        self.stdout.write(f"评价服务启动: http://{options['addrport']}")
        call_command("runserver", options["addrport"], use_reloader=False)
