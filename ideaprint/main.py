from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging, os
from ideaprint.config import settings
from ideaprint.deps import build_store
from ideaprint.logs import configure_logging
from ideaprint.routers import admin, auth, export, generate, ideas
from ideaprint.routers.generate import GeneratePayload
from ideaprint.schemas import Blueprint, Idea, Project, TaskItem
from ideaprint.services.store import AccessPolicyError, NotFoundError, StoreError

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="IdeaPrint", version="1.0.0")
app.state.store = build_store()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})

@app.exception_handler(ValueError)
async def value_error(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"error": str(exc)})

@app.exception_handler(StoreError)
async def store_error(request: Request, exc: StoreError):
    status = 400
    if isinstance(exc, AccessPolicyError):
        status = 403
    elif isinstance(exc, NotFoundError):
        status = 404
    return JSONResponse(status_code=status, content={"error": exc.message, "code": exc.code})

@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})

@app.get("/healthz")
def healthz():
    return {"status": "ok"}

app.include_router(generate.router, prefix="/api", tags=["generate"])
app.include_router(ideas.router, prefix="/api", tags=["ideas"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(export.router, prefix="/export", tags=["export"])

os.makedirs(settings.EXPORT_DIR, exist_ok=True)
app.mount("/exports", StaticFiles(directory=settings.EXPORT_DIR), name="exports")

@app.get("/schemas", tags=["meta"])
def get_schemas():
    return {
        "generate_request": GeneratePayload.model_json_schema(),
        "blueprint": Blueprint.model_json_schema(by_alias=True),
        "idea": Idea.model_json_schema(by_alias=True),
        "project": Project.model_json_schema(by_alias=True),
        "task": TaskItem.model_json_schema(by_alias=True),
    }

def run():
    import uvicorn
    uvicorn.run("ideaprint.main:app", host=settings.API_HOST, port=settings.API_PORT)

if __name__ == "__main__":
    run()
