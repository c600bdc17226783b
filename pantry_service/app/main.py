import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import engine, Base
from shared.helpers.exception_handler import setup_exception_handlers

from .models.restaurants import restaurants
from .models.menu import ingredient_library, menu_items, recipe_ingredients
from .models.inventory import restaurant_inventory, waste_log
from .models.procurement import purchase_orders
from .router.menu import menu_items_router, recipes_router
from .router.pos_import import pos_import_router
from .router.overview import metrics_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="Pantry Service API")

# Create all tables
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(menu_items_router.router)
app.include_router(recipes_router.router)
app.include_router(pos_import_router.router)
app.include_router(metrics_router.router)


@app.get("/api/health", tags=["Health"])
def health():
    return {"status": "ok", "service": "pantry_service", "environment": settings.ENVIRONMENT}
