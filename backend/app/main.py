from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import logging
import os

from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logging_config import setup_logging
from app.routes.auth import router as auth_router
from app.routes.health import router as health_router
from app.routes.menu_histories import router as menu_histories_router
from app.routes.orders import router as orders_router
from app.routes.payments import router as payments_router
from app.routes.products import router as products_router
from app.routes.today_menu import router as today_menu_router
from app.routes.users import router as users_router
from app.core.database import SessionLocal, init_db
from app.services.seed import seed_demo


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Restaurant Manager API", version="0.1.0")

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Total-Count"],
        )

    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(users_router, prefix="/users", tags=["users"])
    app.include_router(products_router, prefix="/products", tags=["products"])
    app.include_router(today_menu_router, prefix="/today-menu", tags=["today-menu"])
    app.include_router(menu_histories_router, prefix="/menu-histories", tags=["menu-histories"])
    app.include_router(orders_router, prefix="/orders", tags=["orders"])
    app.include_router(payments_router, prefix="/payments", tags=["payments"])

    images_dir = os.path.join(settings.public_dir, "images")
    os.makedirs(images_dir, exist_ok=True)
    app.mount("/images", StaticFiles(directory=images_dir), name="images")

    return app


app = create_app()

# Only seed in development or when explicitly requested
if settings.env == "dev" or os.getenv("FORCE_SEED") == "true":
    try:
        init_db()
        with SessionLocal() as db:
            seed_demo(db)
    except Exception:
        logger.exception("Could not initialise the development database")
