# mindbalance/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import get_config_provider
from .errors import install_error_handlers
from .routes import ops, rpc
from .settings import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # load config once at startup so a broken file fails fast
    get_config_provider()
    yield


app = FastAPI(title="Mind Balance tool service", version=settings.APP_VERSION, lifespan=lifespan)
install_error_handlers(app)

app.include_router(rpc.router)
app.include_router(ops.router)


@app.get("/")
def health():
    return {"status": "ok", "service": settings.SERVICE_NAME}
