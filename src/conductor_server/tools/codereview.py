"""Step-based code review tool."""

from conductor_server.models.tools import CodeReviewInput
from conductor_server.tools.base import WorkflowTool, bullet_list, format_issues
from conductor_server.workflow import ResolvedConversation, StepKind, classify_step

REVIEW_FOCUS = {
    "full": "quality, security, performance, and architecture",
    "security": "security vulnerabilities and best practices",
    "performance": "performance bottlenecks and optimization opportunities",
    "quick": "critical issues and code quality basics",
}


class CodeReviewTool(WorkflowTool):
    name = "codereview"
    description = (
        "Performs systematic, step-by-step code review with expert validation. "
        "Use for comprehensive analysis covering quality, security, performance, "
        "and architecture. Guides through structured investigation to ensure "
        "thoroughness."
    )
    category = "specialized"
    input_model = CodeReviewInput
    trailer_title = "Code Review Info"

    def conversation_metadata(self, params: CodeReviewInput) -> dict:
        return {
            "tool": self.name,
            "model": self.select_model(params),
            "review_type": params.review_type,
        }

    def system_prompt(self, params: CodeReviewInput) -> str | None:
        return (
            f"You are an expert code reviewer conducting a {params.review_type} "
            "review. Provide thorough, constructive feedback with specific "
            "recommendations."
        )

    def temperature(self, params: CodeReviewInput) -> float | None:
        return 0.5

    def build_prompt(
        self, params: CodeReviewInput, conversation: ResolvedConversation
    ) -> str:
        prompt = f"# Code Review - Step {params.step_number}/{params.total_steps}\n\n"
        prompt += f"**Review Type**: {params.review_type}\n\n"

        if classify_step(params.step_number) is StepKind.INITIAL:
            prompt += f"## Review Strategy\n\n{params.step}\n\n"
            prompt += f"Focus areas: {REVIEW_FOCUS[params.review_type]}\n\n"
        else:
            prompt += f"## Review Progress\n\n{params.step}\n\n"

        prompt += f"### Findings\n{params.findings}\n\n"

        if params.files_checked:
            prompt += f"### Files Examined\n{bullet_list(params.files_checked)}\n\n"
        if params.relevant_files:
            prompt += f"### Key Files\n{bullet_list(params.relevant_files)}\n\n"

        prompt += format_issues(params.issues_found)

        if params.next_step_required:
            prompt += "### Next Review Phase\n"
            prompt += "Continue the review by:\n"
            prompt += "- Examining additional aspects\n"
            prompt += "- Looking for related issues\n"
            prompt += "- Validating findings\n"
        else:
            prompt += "### Review Summary\n"
            prompt += "Provide final summary including:\n"
            prompt += "- Overall code quality assessment\n"
            prompt += "- Critical issues that must be addressed\n"
            prompt += "- Recommendations for improvement\n"
            prompt += "- Positive aspects worth noting\n"

        return prompt

    def trailer_details(self, params: CodeReviewInput) -> list[tuple[str, str]]:
        return [
            ("Review Type", params.review_type),
            ("Issues Found", str(len(params.issues_found))),
        ]
