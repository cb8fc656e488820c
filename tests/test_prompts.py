from domain.evaluation_models import EvaluationSettings
from infra.llm.prompts import RESUME_CHAR_BUDGET, build_evaluation_prompt

ANSWERS = {"technologies": "React", "yearsExperience": 3}


def test_prompt_is_deterministic():
    settings = EvaluationSettings(overview="Frontend role", must_have_keywords=["react"])
    first = build_evaluation_prompt("Frontend Engineer", settings, ANSWERS, "resume body")
    second = build_evaluation_prompt("Frontend Engineer", settings, ANSWERS, "resume body")
    assert first == second


def test_missing_settings_use_placeholders():
    prompt = build_evaluation_prompt("Backend Engineer", None, ANSWERS)
    assert "Position: Backend Engineer" in prompt
    assert "General expectations: No overview provided." in prompt
    assert "Must-have keywords: Not specified" in prompt
    assert "Nice-to-have keywords: Not specified" in prompt
    assert "did not upload a resume" in prompt
    assert "form owner" not in prompt


def test_settings_and_answers_are_rendered():
    settings = EvaluationSettings(
        overview="Own the design system",
        must_have_keywords=["react", "typescript"],
        nice_to_have_keywords=["storybook"],
        custom_prompt="Prefer open source contributors.",
    )
    prompt = build_evaluation_prompt("UI Engineer", settings, ANSWERS)
    assert "Must-have keywords: react, typescript" in prompt
    assert "Nice-to-have keywords: storybook" in prompt
    assert "The form owner also gave this instruction: Prefer open source contributors." in prompt
    assert '"technologies": "React"' in prompt
    assert prompt.rstrip().endswith("Keep the summary short and clear.")
    assert '"score": number (0-100)' in prompt


def test_resume_is_truncated_to_budget():
    resume = "a" * (RESUME_CHAR_BUDGET + 500) + "TAIL"
    prompt = build_evaluation_prompt("Role", None, {}, resume)
    assert "a" * RESUME_CHAR_BUDGET in prompt
    assert "a" * (RESUME_CHAR_BUDGET + 1) not in prompt
    assert "TAIL" not in prompt
    assert "Summarize the resume if it is longer" in prompt
