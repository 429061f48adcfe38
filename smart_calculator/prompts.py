"""Prompt, system instruction and response schema sent to the model."""

from jinja2 import Environment, PackageLoader, StrictUndefined


SYSTEM_INSTRUCTION = (
    "You are an expert mathematician and calculator assistant. Your goal is to "
    "provide accurate results and clear, step-by-step logic for any mathematical "
    "expression or word problem provided."
)

# Provider-neutral schema; Gemini accepts this dict form directly.
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "result": {
            "type": "STRING",
            "description": "The final numeric or short text answer to the math problem.",
        },
        "explanation": {
            "type": "STRING",
            "description": "A concise, step-by-step explanation of how the result was achieved.",
        },
        "isError": {
            "type": "BOOLEAN",
            "description": "Set to true if the input was not a valid math request or could not be solved.",
        },
    },
    "required": ["result", "explanation", "isError"],
}

_env = Environment(
    loader=PackageLoader("smart_calculator", "templates"),
    autoescape=False,
    keep_trailing_newline=False,
    undefined=StrictUndefined,
)


def render_solve_prompt(problem: str) -> str:
    """Build the user prompt, embedding the problem text verbatim."""
    template = _env.get_template("solve_prompt.j2")
    return template.render(problem=problem).strip()
