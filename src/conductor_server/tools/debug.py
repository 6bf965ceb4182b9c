"""Step-based debugging and root cause analysis tool."""

from conductor_server.models.tools import DebugInput
from conductor_server.tools.base import WorkflowTool, bullet_list
from conductor_server.workflow import ResolvedConversation, StepKind, classify_step


class DebugTool(WorkflowTool):
    name = "debug"
    description = (
        "Performs systematic debugging and root cause analysis for any type of "
        "issue. Use for complex bugs, mysterious errors, performance issues, race "
        "conditions, memory leaks, and integration problems. Guides through "
        "structured investigation with hypothesis testing and expert analysis."
    )
    input_model = DebugInput
    trailer_title = "Debug Session Info"

    def conversation_metadata(self, params: DebugInput) -> dict:
        return {
            "tool": self.name,
            "model": self.select_model(params),
            "thinking_mode": params.thinking_mode,
        }

    def system_prompt(self, params: DebugInput) -> str | None:
        if not params.thinking_mode:
            return None
        return (
            f"You are a debugging expert operating in {params.thinking_mode} "
            "thinking mode. Provide systematic analysis with appropriate depth "
            "for this mode."
        )

    def temperature(self, params: DebugInput) -> float | None:
        return 0.7

    def build_prompt(self, params: DebugInput, conversation: ResolvedConversation) -> str:
        prompt = f"# Debug Investigation - Step {params.step_number}/{params.total_steps}\n\n"

        if classify_step(params.step_number) is StepKind.INITIAL:
            prompt += f"## Initial Investigation\n\n{params.step}\n\n"
            prompt += "### Investigation Approach\n"
            prompt += "Start by establishing:\n"
            prompt += "- The observed symptoms and how to reproduce them\n"
            prompt += "- Plausible causes worth ruling in or out\n"
            prompt += "- The evidence that would distinguish between them\n\n"
        else:
            prompt += f"## Step {params.step_number}\n\n{params.step}\n\n"

        prompt += f"### Current Findings\n{params.findings}\n\n"

        if params.hypothesis:
            prompt += f"### Hypothesis\n{params.hypothesis}\n\n"
            if params.confidence:
                prompt += f"**Confidence Level**: {params.confidence}\n\n"

        if params.files_checked:
            prompt += f"### Files Examined\n{bullet_list(params.files_checked)}\n\n"
        if params.relevant_files:
            prompt += f"### Relevant Files\n{bullet_list(params.relevant_files)}\n\n"
        if params.relevant_context:
            prompt += f"### Relevant Context\n{bullet_list(params.relevant_context)}\n\n"
        if params.images:
            prompt += f"### Screenshots\n{bullet_list(params.images)}\n\n"

        if params.backtrack_from_step:
            prompt += (
                "### Note\nBacktracking from step "
                f"{params.backtrack_from_step} to revise analysis.\n\n"
            )

        prompt += "### Next Steps\n"
        if params.next_step_required:
            prompt += f"Continue investigation with step {params.step_number + 1}. "
            prompt += "Provide guidance on:\n"
            prompt += "- What to investigate next\n"
            prompt += "- Which files or code paths to examine\n"
            prompt += "- What evidence to look for\n"
            prompt += "- How to test the current hypothesis\n"
        else:
            prompt += "This is the final step. Provide:\n"
            prompt += "- Summary of root cause analysis\n"
            prompt += "- Concrete solution or fix recommendations\n"
            prompt += "- Prevention strategies for similar issues\n"

        return prompt

    def trailer_details(self, params: DebugInput) -> list[tuple[str, str]]:
        details = []
        if params.hypothesis:
            details.append(("Current Hypothesis", params.hypothesis))
        if params.confidence:
            details.append(("Confidence", params.confidence))
        return details
