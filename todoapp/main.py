import logging

from fastapi import FastAPI

from todoapp.config import Config
from todoapp.routers import user_router, todo_router
from todoapp.routers.common import add_exception_handlers, lifespan

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Todo Service", lifespan=lifespan)
add_exception_handlers(app)

app.include_router(user_router.router, prefix="/users", tags=["Users"])
app.include_router(todo_router.router, prefix="/todos", tags=["Todos"])


@app.get("/")
async def read_root():
    return {"message": "Hello, World!"}


# Root health
@app.get("/api/health")
async def health():
    return {"status": "ok"}
