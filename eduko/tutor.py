"""Tutor chat for Live Mode.

The tutor answers a student question in character, grounded on the student's
context. Retrieval is a canned stub: it returns the same reference text,
interaction history and weak areas for every student until a real vector store
and profile database are wired in. Any failure while generating the answer,
missing credentials included, yields a fixed fallback answer instead of an
error.
"""

import logging
from typing import Any, Callable

from .config import Settings
from .flows import FlowResult
from .llm import generate_json
from .models import (
    Interaction,
    KnowledgeGraph,
    Quiz,
    StudentContext,
    TutorAction,
    TutorChatInput,
    TutorChatOutput,
)
from .prompts import render
from .tutor_prompts import (
    FALLBACK_EXPLANATION,
    SUBJECT_CONTEXT,
    TUTOR_SCHEMA,
    TUTOR_SYSTEM_PROMPT,
    TUTOR_TEMPLATE,
)

logger = logging.getLogger(__name__)

Retriever = Callable[[str, str, str], StudentContext]


def retrieve_student_context(student_id: str, topic: str, tutor: str) -> StudentContext:
    logger.info("context retrieval for student %s on topic '%s' with tutor %s", student_id, topic, tutor)
    return StudentContext(
        rag_context=(
            "Integration is the reverse of differentiation. The integral of x^n is (x^(n+1))/(n+1) + C. "
            "For x^2, the integral is x^3/3 + C. The '+ C' is the constant of integration and is very "
            "important. This concept is related to finding the area under a curve."
        ),
        last_interactions=[
            Interaction(q="What is differentiation?", a="It's the rate of change of a function."),
            Interaction(q="Thanks, that makes sense.", a="You're welcome. Shall we try an example?"),
        ],
        knowledge_graph=KnowledgeGraph(
            weak_areas=["limits", "trigonometric identities", "constant of integration"],
        ),
    )


def fallback_answer(data: TutorChatInput) -> TutorChatOutput:
    return TutorChatOutput(
        explanation=FALLBACK_EXPLANATION,
        steps=[],
        quiz=Quiz(question="", options=[], answer="", explain_answer=""),
        actions=[TutorAction(type="animate", name="think_pose")],
        difficulty=data.mode,
    )


def build_tutor_prompt(data: TutorChatInput, context: StudentContext) -> str:
    interactions = "\n".join(f"  Q: {item.q}\n  A: {item.a}" for item in context.last_interactions)
    return render(
        TUTOR_TEMPLATE,
        TUTOR_SCHEMA,
        subject_context=SUBJECT_CONTEXT[data.tutor],
        rag_context=context.rag_context,
        last_interactions=interactions or "  (none)",
        weak_areas=", ".join(context.knowledge_graph.weak_areas) or "none recorded",
        topic=data.topic,
        question=data.question,
        mode=data.mode,
    )


def tutor_chat(
    data: TutorChatInput,
    *,
    client: Any | None = None,
    settings: Settings | None = None,
    retriever: Retriever = retrieve_student_context,
) -> FlowResult:
    context = retriever(data.student_id, data.topic, data.tutor)
    prompt = build_tutor_prompt(data, context)

    try:
        output, raw = generate_json(
            prompt,
            TutorChatOutput,
            system=TUTOR_SYSTEM_PROMPT,
            client=client,
            settings=settings,
        )
    except Exception:
        logger.exception("tutor chat fell back for student %s", data.student_id)
        return FlowResult(output=fallback_answer(data))

    logger.info("tutor %s answered student %s at difficulty %s", data.tutor, data.student_id, output.difficulty)
    return FlowResult(output=output, raw=raw)
