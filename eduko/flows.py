import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel

from .config import Settings
from .llm import generate_json, generate_text
from .models import (
    ChatInput,
    ChatReply,
    FormGuide,
    FormGuideInput,
    ProgramEvaluationInput,
    ProgramEvaluations,
    ProjectIdeaInput,
    ProjectRoadmap,
    SmartNotes,
    SmartNotesInput,
    TimetableInput,
    TimetableOutput,
)
from .prompts import (
    CHAT_SYSTEM_TEMPLATE,
    FORM_GUIDE_SCHEMA,
    FORM_GUIDE_TEMPLATE,
    PROGRAMS_SCHEMA,
    PROGRAMS_TEMPLATE,
    PROJECT_SCHEMA,
    PROJECT_TEMPLATE,
    SMART_NOTES_SCHEMA,
    SMART_NOTES_TEMPLATE,
    SYSTEM_PROMPT,
    TIMETABLE_SCHEMA,
    TIMETABLE_TEMPLATE,
    render,
)

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class FlowResult:
    output: BaseModel
    raw: Optional[str] = None


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def generate_timetable(
    data: TimetableInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    prompt = render(
        TIMETABLE_TEMPLATE,
        TIMETABLE_SCHEMA,
        subjects=data.subjects,
        weak_areas=data.weak_areas,
        strong_areas=data.strong_areas,
        study_hours=_format_number(data.study_hours),
        exam_dates=data.exam_dates,
        lifestyle_schedule=data.lifestyle_schedule,
    )
    output, raw = generate_json(prompt, TimetableOutput, system=SYSTEM_PROMPT, client=client, settings=settings)
    return FlowResult(output=output, raw=raw)


def evaluate_college_programs(
    data: ProgramEvaluationInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    prompt = render(
        PROGRAMS_TEMPLATE,
        PROGRAMS_SCHEMA,
        stream=data.stream,
        exam_scores=data.exam_scores,
        budget=_format_number(data.budget),
        location_preference=data.location_preference,
        future_goal=data.future_goal,
    )
    output, raw = generate_json(prompt, ProgramEvaluations, system=SYSTEM_PROMPT, client=client, settings=settings)
    return FlowResult(output=output, raw=raw)


def generate_smart_notes(
    data: SmartNotesInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    prompt = render(
        SMART_NOTES_TEMPLATE,
        SMART_NOTES_SCHEMA,
        raw_text=data.raw_text,
        topic=data.topic,
        grade_level=data.grade_level,
    )
    output, raw = generate_json(prompt, SmartNotes, system=SYSTEM_PROMPT, client=client, settings=settings)
    return FlowResult(output=output, raw=raw)


def generate_project_ideas(
    data: ProjectIdeaInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    prompt = render(
        PROJECT_TEMPLATE,
        PROJECT_SCHEMA,
        education_type=data.education_type,
        branch=data.branch or "N/A",
        interests=", ".join(data.interests),
        project_idea=data.project_idea,
    )
    output, raw = generate_json(prompt, ProjectRoadmap, system=SYSTEM_PROMPT, client=client, settings=settings)
    return FlowResult(output=output, raw=raw)


def generate_form_filling_guide(
    data: FormGuideInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    prompt = render(
        FORM_GUIDE_TEMPLATE,
        FORM_GUIDE_SCHEMA,
        form_type=data.form_type,
        student_grade_level=data.student_grade_level,
    )
    output, raw = generate_json(prompt, FormGuide, system=SYSTEM_PROMPT, client=client, settings=settings)
    return FlowResult(output=output, raw=raw)


def _chat_messages(data: ChatInput) -> list[dict[str, str]]:
    messages: list[dict[str, str]] = []
    for turn in data.history:
        text = "".join(part.text for part in turn.content).strip()
        if not text:
            continue
        role = "assistant" if turn.role == "model" else "user"
        # The provider expects the conversation to open with a user turn.
        if not messages and role == "assistant":
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + text
        else:
            messages.append({"role": role, "content": text})

    if messages and messages[-1]["role"] == "user":
        messages[-1]["content"] += "\n\n" + data.message
    else:
        messages.append({"role": "user", "content": data.message})
    return messages


def conversational_chat(
    data: ChatInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
) -> FlowResult:
    messages = _chat_messages(data)
    reply = generate_text(
        messages,
        system=CHAT_SYSTEM_TEMPLATE.format(persona=data.persona),
        client=client,
        settings=settings,
        temperature=CHAT_TEMPERATURE,
    )
    logger.debug("chat reply generated after %d turns", len(messages))
    return FlowResult(output=ChatReply(reply=reply), raw=reply)
