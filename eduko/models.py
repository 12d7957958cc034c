from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator
from pydantic.alias_generators import to_camel


class FlowInput(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class FlowOutput(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


# Timetable

class TimetableInput(FlowInput):
    subjects: str
    weak_areas: str
    strong_areas: str
    study_hours: float = Field(..., gt=0, le=24)
    exam_dates: str
    lifestyle_schedule: str


class TimetableOutput(FlowOutput):
    weekly_timetable: str = Field(..., min_length=1)
    warnings: str


# College program evaluation

class ProgramEvaluationInput(FlowInput):
    stream: str
    exam_scores: str
    budget: float = Field(..., ge=0)
    location_preference: str
    future_goal: str


class ProgramEvaluation(FlowOutput):
    program_name: str = Field(..., min_length=1)
    match_reason: str
    admission_probability: str
    cutoff_analysis: str
    pros: str
    cons: str


class ProgramEvaluations(RootModel[List[ProgramEvaluation]]):
    pass


# Smart notes

class SmartNotesInput(FlowInput):
    raw_text: str
    topic: str
    grade_level: str


class ConceptBreakdown(FlowOutput):
    what: str
    why: str
    how: str


class SmartNotes(FlowOutput):
    summary: str
    mind_map: str
    flashcards: str
    mcqs: str
    full_notes: str
    fill_in_the_blanks: str
    concept_breakdown: ConceptBreakdown


# Project roadmap

class ProjectIdeaInput(FlowInput):
    education_type: str
    branch: Optional[str] = None
    interests: List[str]
    project_idea: str


class ProjectRoadmap(FlowOutput):
    summary: str
    required_skills: List[str]
    hardware_requirements: List[str]
    software_requirements: List[str]
    build_plan: List[str]
    architecture_diagram: str


# Form filling guide

class FormGuideInput(FlowInput):
    form_type: str
    student_grade_level: str


class FormGuide(FlowOutput):
    guide: str = Field(..., min_length=1)


# Persona chat

class ChatPart(FlowInput):
    text: str


class ChatTurn(FlowInput):
    role: Literal["user", "model"]
    content: List[ChatPart]


class ChatInput(FlowInput):
    persona: str
    history: List[ChatTurn]
    message: str


class ChatReply(FlowOutput):
    reply: str


# Speech

Voice = Literal["Algenib", "Arcturus", "Canopus", "Antares", "Altair", "Achernar", "Spica", "Sirius"]


class SpeechInput(FlowInput):
    text: str = Field(..., min_length=1)
    voice: Voice = "Algenib"

    @field_validator("text")
    @classmethod
    def require_speakable_text(cls, value: str) -> str:
        if not any(ch.isalnum() for ch in value):
            raise ValueError("text must contain at least one letter or digit")
        return value


class SpeechOutput(FlowOutput):
    audio_data_uri: str


# Tutor chat

Tutor = Literal["mr_vasu", "mr_bondz", "mr_ohm", "mr_aryan", "sanjivani"]
Difficulty = Literal["easy", "medium", "hard"]


class TutorChatInput(FlowInput):
    tutor: Tutor
    topic: str
    student_id: str
    question: str
    mode: Difficulty


class Interaction(FlowOutput):
    q: str
    a: str


class KnowledgeGraph(FlowOutput):
    weak_areas: List[str] = Field(..., alias="weak_areas")


class StudentContext(FlowOutput):
    rag_context: str
    last_interactions: List[Interaction]
    knowledge_graph: KnowledgeGraph


class Quiz(FlowOutput):
    question: str
    options: List[str]
    answer: str
    explain_answer: str = Field(..., alias="explain_answer")


class TutorAction(FlowOutput):
    type: Literal["diagram", "animate"]
    name: str


class TutorChatOutput(FlowOutput):
    explanation: str
    steps: List[str]
    quiz: Quiz
    actions: List[TutorAction]
    difficulty: Difficulty
