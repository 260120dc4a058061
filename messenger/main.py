import sys
import os
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Добавляем корневую директорию в PYTHONPATH для прямого запуска
if __name__ == "__main__":
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from messenger.config import settings

# Настройка логирования
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)
from messenger.core.database import engine
from messenger.models import base
from messenger.api.endpoints import messages, notifications, realtime

logger = logging.getLogger(__name__)

app = FastAPI(title="Messenger API")

# Роуты
app.include_router(messages.router, prefix="/api/messages", tags=["Messages"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(realtime.router)


# --- Ошибки валидации ------------------------------------------------------
# У API нет отдельной 4xx-таксономии: некорректное тело запроса отдаётся
# тем же общим ответом, что и любая другая ошибка.

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# --- Базовый эндпоинт
@app.get("/")
async def root():
    return {"message": "Messenger API is running"}


def init_database():
    """Создание таблиц при первом запуске"""
    base.Base.metadata.create_all(bind=engine)
    logging.info("✅ База данных инициализирована")


# --- События FastAPI -------------------------------------------------------

@app.on_event("startup")
async def on_startup():
    """Запускается автоматически при старте FastAPI (uvicorn)"""
    try:
        init_database()
    except Exception as e:
        logging.error(f"❌ Ошибка инициализации БД: {e}")
        raise


# --- Возможность запуска как скрипта --------------------------------------

if __name__ == "__main__":
    init_database()
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
