"""
快捷启动脚本
使用方法：python start.py [监听地址]
先执行数据库迁移，再检查存储连通性并启动评价服务
"""
import os
import sys

from django.core.management import call_command


def start_server(addrport=None):
    """启动评价服务"""
    print("=" * 50)
    print("供应商绩效评价系统")
    print("=" * 50)
    print()
    print("正在启动...")
    print("提示：按 Ctrl+C 停止服务器")
    print()

    call_command("migrate", interactive=False, verbosity=0)
    if addrport:
        call_command("serve_evaluations", addrport)
    else:
        call_command("serve_evaluations")


if __name__ == '__main__':
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
    import django
    django.setup()

    try:
        start_server(sys.argv[1] if len(sys.argv) > 1 else None)
    except KeyboardInterrupt:
        print("\n\n服务器已停止")
        sys.exit(0)
