from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .db.schema import init_db
from .routers import (
    forms,
    health,
    settings,
)
from .routers.health import APP_VERSION
from .scheduler import start_deadline_scheduler, stop_deadline_scheduler

app = FastAPI(title="Form Closer API", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup() -> None:
    init_db()
    start_deadline_scheduler()


@app.on_event("shutdown")
async def shutdown() -> None:
    await stop_deadline_scheduler()


app.include_router(health.router)
app.include_router(settings.router)
app.include_router(forms.router)


@app.get("/")
def root():
    return {"message": "Form Closer API", "docs": "/docs"}
