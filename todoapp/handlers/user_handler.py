from fastapi import FastAPI
from mangum import Mangum
from todoapp.routers.common import add_exception_handlers, lifespan
from todoapp.routers.user_router import router as user_router

app = FastAPI(title="User Lambda", lifespan=lifespan)
add_exception_handlers(app)
app.include_router(user_router, prefix="/users")

handler = Mangum(app)
