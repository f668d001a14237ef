# Cooklog API Main Entry Point
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from .errors import register_exception_handlers
from .settings import settings
from .routers.ready import router as ready_router
from .routers.auth import router as auth_router
from .routers.user import router as user_router
from .routers.extract import router as extract_router
from .routers.recipes import router as recipes_router
from .routers.fridge import router as fridge_router
from .routers.ingredients import router as ingredients_router
from .routers.cooking_logs import router as cooking_logs_router
from .routers.dashboard import router as dashboard_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("cooklog")

# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=["100/minute"])

app = FastAPI(title="Cooklog API", version="0.1.0")
app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(user_router, prefix="/api", tags=["user"])
# Registered before recipes so /recipes/extract is never read as a recipe id
app.include_router(extract_router, prefix="/api", tags=["extract"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(fridge_router, prefix="/api", tags=["fridge"])
app.include_router(ingredients_router, prefix="/api", tags=["ingredients"])
app.include_router(cooking_logs_router, prefix="/api", tags=["cooking-logs"])
app.include_router(dashboard_router, prefix="/api", tags=["dashboard"])
