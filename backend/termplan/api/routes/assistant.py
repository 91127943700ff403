from fastapi import APIRouter, Depends

from termplan.api.deps import get_assistant, get_store
from termplan.schemas.report import AssistantAnswer, AssistantQuestion
from termplan.services.assistant import ScheduleAssistant
from termplan.services.records import load_requests, load_sections
from termplan.services.store import DocumentStore

router = APIRouter()


@router.post("/assistant", response_model=AssistantAnswer)
def ask_assistant(
    department_id: str,
    payload: AssistantQuestion,
    store: DocumentStore = Depends(get_store),
    assistant: ScheduleAssistant = Depends(get_assistant),
) -> AssistantAnswer:
    answer = assistant.ask(payload.question, load_sections(store, department_id), load_requests(store, department_id))
    return AssistantAnswer(answer=answer)
