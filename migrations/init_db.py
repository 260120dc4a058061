from pathlib import Path
import argparse
import logging
import sys

# Добавляем корень проекта в PYTHONPATH для запуска скриптом
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from messenger.core.database import engine, SessionLocal
from messenger.models.base import Base, User

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Пароль заглушек недоступен для входа: реальные хэши выставляет сервис авторизации
UNUSABLE_PASSWORD = "!"

DEMO_USERS = [
    ("Alice Demo", "alice@example.com"),
    ("Bob Demo", "bob@example.com"),
    ("Carol Demo", "carol@example.com"),
]

def create_tables():
    """Создание всех таблиц мессенджера (users, messages, media, conversations, notifications)"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Таблицы созданы")
    except SQLAlchemyError as e:
        logger.error(f"❌ Ошибка работы с БД: {e}")
        raise

def seed_demo_users():
    """Добавляет демо-пользователей, если их ещё нет"""
    db = SessionLocal()
    try:
        created = 0
        for full_name, email in DEMO_USERS:
            if db.query(User).filter(User.email == email).first():
                continue
            db.add(User(full_name=full_name, email=email, password=UNUSABLE_PASSWORD))
            created += 1
        db.commit()
        logger.info(f"✅ Демо-пользователей добавлено: {created}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Ошибка при добавлении пользователей: {e}")
        raise
    finally:
        db.close()

def print_table_structure():
    """Выводим структуру таблиц"""
    inspector = inspect(engine)
    for table in inspector.get_table_names():
        print(f"\n📋 Структура таблицы {table}:")
        for col in inspector.get_columns(table):
            print(f"  {col['name']:<20} {str(col['type']):<15} {'NULL' if col['nullable'] else 'NOT NULL'}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Инициализация базы данных мессенджера")
    parser.add_argument("--seed", action="store_true", help="Добавить демо-пользователей")
    args = parser.parse_args()

    try:
        print("🔄 Инициализация базы данных...")
        create_tables()
        if args.seed:
            seed_demo_users()
        print_table_structure()
        print("\n✅ Миграция завершена успешно!")
        print("\n📝 Следующие шаги:")
        print("   1. Запустить приложение: python -m messenger.main")
        print("   2. Подключить клиента к ws://<host>:8000/ws с заголовком X-User-Id")

    except Exception as e:
        logger.error(f"💥 Фатальная ошибка: {e}")
        sys.exit(1)
