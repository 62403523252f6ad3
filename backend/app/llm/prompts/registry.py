# app/llm/prompts/registry.py

from dataclasses import dataclass

from app.llm.prompts import templates

@dataclass(frozen=True)
class PromptTemplate:
    name: str
    version: str
    template: str
    system_instruction: str | None = None

PROMPTS: dict[tuple[str, str], PromptTemplate] = {
    ("generate_questions", "v1"): PromptTemplate("generate_questions", "v1", templates.GENERATE_QUESTIONS_V1),
    ("answer_question", "v1"): PromptTemplate(
        "answer_question", "v1", templates.ANSWER_QUESTION_V1, system_instruction=templates.STUDY_SYSTEM_V1
    ),
    ("interlinear", "v1"): PromptTemplate("interlinear", "v1", templates.INTERLINEAR_V1),
}

def get_prompt(name: str, version: str) -> PromptTemplate:
    key = (name, version)
    if key not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}@{version}")
    return PROMPTS[key]
