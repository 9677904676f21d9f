from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slopchat.config import settings
from slopchat.errors import register_error_handlers
from slopchat.routes import chat, health, lead

app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(chat.router)
app.include_router(lead.router)
