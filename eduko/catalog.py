from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from .config import Settings
from .flows import (
    FlowResult,
    conversational_chat,
    evaluate_college_programs,
    generate_form_filling_guide,
    generate_project_ideas,
    generate_smart_notes,
    generate_timetable,
)
from .models import (
    ChatInput,
    FormGuideInput,
    ProgramEvaluationInput,
    ProjectIdeaInput,
    SmartNotesInput,
    SpeechInput,
    TimetableInput,
    TutorChatInput,
)
from .speech import Synthesizer, generate_speech
from .tutor import tutor_chat


@dataclass(frozen=True)
class Flow:
    name: str
    description: str
    input_model: type[BaseModel]
    runner: Callable[..., FlowResult]
    uses_llm: bool = True

    def run(
        self,
        data: BaseModel,
        *,
        client: Any | None = None,
        settings: Settings | None = None,
        synthesizer: Synthesizer | None = None,
    ) -> FlowResult:
        if self.uses_llm:
            return self.runner(data, client=client, settings=settings)
        return self.runner(data, synthesizer=synthesizer)


FLOWS: dict[str, Flow] = {
    flow.name: flow
    for flow in (
        Flow("generate-timetable", "Weekly study timetable", TimetableInput, generate_timetable),
        Flow(
            "evaluate-college-programs",
            "Best-fit college programs",
            ProgramEvaluationInput,
            evaluate_college_programs,
        ),
        Flow("generate-smart-notes", "Smart notes from raw text", SmartNotesInput, generate_smart_notes),
        Flow("generate-project-ideas", "Project roadmap", ProjectIdeaInput, generate_project_ideas),
        Flow(
            "generate-form-filling-guide",
            "Step-by-step form guide",
            FormGuideInput,
            generate_form_filling_guide,
        ),
        Flow("conversational-chat", "Persona chat", ChatInput, conversational_chat),
        Flow("generate-speech", "Text to speech", SpeechInput, generate_speech, uses_llm=False),
        Flow("tutor-chat", "Live Mode tutor", TutorChatInput, tutor_chat),
    )
}


def get_flow(name: str) -> Flow:
    try:
        return FLOWS[name]
    except KeyError:
        raise KeyError(f"unknown flow '{name}'") from None
