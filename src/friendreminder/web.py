from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from friendreminder.routes import contacts
from friendreminder.store import init_store


def create_app() -> FastAPI:
    init_store()

    app = FastAPI(title="Friend Reminder")
    app.include_router(contacts.router)

    @app.get("/")
    async def index():
        return RedirectResponse(url="/api/friend-contacts", status_code=302)

    return app
