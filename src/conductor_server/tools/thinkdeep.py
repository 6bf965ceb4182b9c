"""Extended multi-stage reasoning tool."""

from conductor_server.models.tools import ThinkDeepInput
from conductor_server.tools.base import WorkflowTool
from conductor_server.workflow import ResolvedConversation, StepKind, classify_step

THINKING_INSTRUCTIONS = {
    "minimal": "Provide quick, focused analysis without extensive exploration.",
    "low": "Basic reasoning with key considerations.",
    "medium": "Moderate analysis covering main perspectives and implications.",
    "high": "Deep analysis with multiple perspectives, edge cases, and implications.",
    "max": (
        "Comprehensive reasoning with extensive exploration of all angles, "
        "trade-offs, and long-term consequences."
    ),
}

THINKING_TEMPERATURES = {"minimal": 0.3, "max": 0.8}


class ThinkDeepTool(WorkflowTool):
    name = "thinkdeep"
    description = (
        "Performs multi-stage investigation and reasoning for complex problem "
        "analysis. Use for architecture decisions, complex bugs, performance "
        "challenges, and security analysis. Provides systematic hypothesis "
        "testing, evidence-based investigation, and expert validation."
    )
    input_model = ThinkDeepInput
    trailer_title = "Deep Thinking Session Info"

    def conversation_metadata(self, params: ThinkDeepInput) -> dict:
        return {
            "tool": self.name,
            "model": self.select_model(params),
            "thinking_mode": params.thinking_mode,
        }

    def system_prompt(self, params: ThinkDeepInput) -> str | None:
        return (
            f"You are an expert analytical thinker operating in "
            f"{params.thinking_mode} mode. {THINKING_INSTRUCTIONS[params.thinking_mode]} "
            "Provide structured, evidence-based reasoning."
        )

    def temperature(self, params: ThinkDeepInput) -> float | None:
        return THINKING_TEMPERATURES.get(params.thinking_mode, 0.6)

    def build_prompt(
        self, params: ThinkDeepInput, conversation: ResolvedConversation
    ) -> str:
        prompt = (
            f"# Deep Thinking Session - Step {params.step_number}/{params.total_steps}\n\n"
        )

        if classify_step(params.step_number) is StepKind.INITIAL:
            prompt += f"## Problem/Question\n\n{params.step}\n\n"
            prompt += "### Analysis Approach\n"
            prompt += (
                f"**Thinking Mode**: {params.thinking_mode} - "
                f"{THINKING_INSTRUCTIONS[params.thinking_mode]}\n\n"
            )
            prompt += "Please provide an initial analysis considering:\n"
            prompt += "- Core problem or question\n"
            prompt += "- Key factors and constraints\n"
            prompt += "- Potential approaches or angles to explore\n"
            prompt += "- What needs deeper investigation\n\n"
        else:
            prompt += f"## Continued Analysis\n\n{params.step}\n\n"

        prompt += f"### Current Findings\n{params.findings}\n\n"

        if params.next_step_required:
            prompt += "### Next Phase\n"
            prompt += "This is an intermediate step. Continue the analysis by:\n"
            prompt += "- Building on previous findings\n"
            prompt += "- Exploring additional perspectives\n"
            prompt += "- Identifying gaps or uncertainties\n"
            prompt += "- Refining understanding\n"
        else:
            prompt += "### Final Synthesis\n"
            prompt += "This is the final step. Provide:\n"
            prompt += "- Comprehensive synthesis of all findings\n"
            prompt += "- Clear conclusions or recommendations\n"
            prompt += "- Trade-offs and considerations\n"
            prompt += "- Action items or next steps\n"

        return prompt

    def trailer_details(self, params: ThinkDeepInput) -> list[tuple[str, str]]:
        return [("Thinking Mode", params.thinking_mode)]
