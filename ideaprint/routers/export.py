from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import os
from ideaprint.deps import get_owner, get_store
from ideaprint.services import export_docx
from ideaprint.services.store import IdeaStore

router = APIRouter()

class ExportRequest(BaseModel):
    idea_id: str

@router.post("/docx")
def export_docx_endpoint(req: ExportRequest, owner: str = Depends(get_owner), store: IdeaStore = Depends(get_store)):
    idea = store.get_idea(req.idea_id, owner)
    blueprint = store.get_blueprint(req.idea_id, owner)
    if blueprint is None:
        raise HTTPException(status_code=404, detail="blueprint not found")
    outpath = export_docx.build_doc(idea=idea, blueprint=blueprint)
    return {"downloadUrl": f"/exports/{os.path.basename(outpath)}", "ideaId": idea.id}
