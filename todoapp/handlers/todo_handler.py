from fastapi import FastAPI
from mangum import Mangum
from todoapp.routers.common import add_exception_handlers, lifespan
from todoapp.routers.todo_router import router as todo_router

app = FastAPI(title="Todo Lambda", lifespan=lifespan)
add_exception_handlers(app)
app.include_router(todo_router, prefix="/todos")

handler = Mangum(app)
