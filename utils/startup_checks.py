from pathlib import Path
import subprocess
import sys

from messenger.config import settings


def check_env_file() -> bool:
    """Warn when .env is missing; every setting has a default, so this never blocks."""
    env_path = Path(".env")
    if not env_path.exists():
        print("⚠️ Файл .env не найден, используются значения по умолчанию.")
        print("\n📝 Для загрузки изображений задайте в .env:")
        print("S3_BUCKET=your_bucket")
        print("S3_ENDPOINT=https://s3.example.com")
        print("S3_ACCESS_KEY=...")
        print("S3_SECRET_KEY=...")
    elif not settings.S3_BUCKET:
        print("⚠️ S3_BUCKET не задан: отправка сообщений с изображениями будет завершаться ошибкой")
    return True


def check_database() -> bool:
    """Ensure the SQLite database exists, run migrations if needed."""
    db_url = settings.DATABASE_URL
    if not db_url.startswith("sqlite") or "///" not in db_url:
        return True

    db_path = Path(db_url.split("///")[-1])
    if not db_path.exists():
        print("📊 База данных не найдена. Инициализируем...")
        try:
            subprocess.run([sys.executable, "migrations/init_db.py"], check=True)
            print("✅ База данных инициализирована")
        except subprocess.CalledProcessError:
            print("❌ Ошибка инициализации базы данных")
            return False
    return True
