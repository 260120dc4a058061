#!/usr/bin/env python3
"""
Скрипт для запуска Messenger API
"""

import sys
import subprocess
import argparse
from utils.startup_checks import check_env_file, check_database


def run_migration(seed=False):
    """Запуск миграции базы данных"""
    print("🔄 Инициализация базы данных...")
    command = [sys.executable, "migrations/init_db.py"]
    if seed:
        command.append("--seed")
    try:
        subprocess.run(command, check=True)
        print("✅ База данных инициализирована")
        return True
    except subprocess.CalledProcessError:
        print("❌ Ошибка инициализации базы данных")
        return False

def run_main_app():
    """Запуск основного приложения"""
    print("🚀 Запуск основного приложения...")
    try:
        subprocess.run([sys.executable, "-m", "messenger.main"], check=True)
    except subprocess.CalledProcessError:
        print("❌ Ошибка запуска приложения")
    except KeyboardInterrupt:
        print("\n⏹️ Приложение остановлено")

def main():
    parser = argparse.ArgumentParser(description="Messenger - Управление системой")
    parser.add_argument("command", choices=["init", "start", "all"],
                       help="Команда для выполнения")
    parser.add_argument("--seed", action="store_true", help="Добавить демо-пользователей при init")

    args = parser.parse_args()

    print("💬 Messenger - бэкенд сообщений")
    print("=" * 50)

    check_env_file()

    if args.command == "init":
        if run_migration(seed=args.seed):
            print("\n✅ Система готова к работе!")
            print("\n📝 Следующий шаг:")
            print("python start_system.py start  # Запустить систему")
            return 0
        return 1

    elif args.command == "start":
        if not check_database():
            return 1
        run_main_app()
        return 0

    elif args.command == "all":
        print("\n1. Инициализация базы данных...")
        if not run_migration(seed=args.seed):
            return 1

        print("\n2. Запуск основного приложения...")
        run_main_app()
        return 0

if __name__ == "__main__":
    sys.exit(main())
