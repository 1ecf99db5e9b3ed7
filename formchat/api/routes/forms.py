"""Form listing endpoint."""

from fastapi import APIRouter

from formchat.api.dependencies import DialogueEngineDep
from formchat.api.models.chat import FormListResponse, FormSummary

router = APIRouter()


@router.get("/forms", response_model=FormListResponse)
async def list_forms(engine: DialogueEngineDep) -> FormListResponse:
    """List hardcoded forms and active templates."""
    schemas = await engine.resolver.list_forms()
    return FormListResponse(forms=[FormSummary.from_schema(s) for s in schemas])
