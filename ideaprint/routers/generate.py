from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional
from ideaprint.services import generator

router = APIRouter()

class GeneratePayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

@router.post("/generate")
def generate(payload: GeneratePayload):
    title = (payload.title or "").strip()
    description = (payload.description or "").strip()
    if not title or not description:
        return JSONResponse(status_code=400, content={"error": "Title and description are required"})
    blueprint = generator.generate_blueprint(title, description)
    return {"success": True, "data": blueprint.dump()}
