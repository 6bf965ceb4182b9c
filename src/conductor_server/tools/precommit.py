"""Step-based validation of changes before committing."""

from conductor_server.models.tools import PrecommitInput
from conductor_server.tools.base import WorkflowTool, bullet_list, format_issues
from conductor_server.workflow import ResolvedConversation, StepKind, classify_step


def _scope(included: bool) -> str:
    return "✓ Included" if included else "✗ Excluded"


class PrecommitTool(WorkflowTool):
    name = "precommit"
    description = (
        "Validates git changes and repository state before committing with "
        "systematic analysis. Use for multi-repository validation, security "
        "review, change impact assessment, and completeness verification. Guides "
        "through structured investigation with expert analysis."
    )
    category = "specialized"
    input_model = PrecommitInput
    trailer_title = "Pre-Commit Validation Info"

    def conversation_metadata(self, params: PrecommitInput) -> dict:
        return {
            "tool": self.name,
            "model": self.select_model(params),
            "path": params.path,
        }

    def system_prompt(self, params: PrecommitInput) -> str | None:
        return (
            "You are a pre-commit validation expert. Analyze changes thoroughly to "
            "prevent bugs, security issues, and quality problems from being committed."
        )

    def temperature(self, params: PrecommitInput) -> float | None:
        return 0.4

    def build_prompt(
        self, params: PrecommitInput, conversation: ResolvedConversation
    ) -> str:
        prompt = (
            f"# Pre-Commit Validation - Step {params.step_number}/{params.total_steps}\n\n"
        )
        if params.path:
            prompt += f"**Repository**: {params.path}\n\n"

        if classify_step(params.step_number) is StepKind.INITIAL:
            prompt += f"## Validation Strategy\n\n{params.step}\n\n"
            prompt += "### Change Scope\n"
            prompt += f"- Staged changes: {_scope(params.include_staged)}\n"
            prompt += f"- Unstaged changes: {_scope(params.include_unstaged)}\n\n"
            prompt += "### Validation Checklist\n"
            prompt += "Analyze changes for:\n"
            prompt += "- Code quality and correctness\n"
            prompt += "- Security vulnerabilities\n"
            prompt += "- Breaking changes\n"
            prompt += "- Missing tests or documentation\n"
            prompt += "- Accidental inclusion of sensitive data\n\n"
        else:
            prompt += f"## Validation Progress\n\n{params.step}\n\n"

        prompt += f"### Findings\n{params.findings}\n\n"

        if params.relevant_files:
            prompt += f"### Files Under Review\n{bullet_list(params.relevant_files)}\n\n"

        prompt += format_issues(params.issues_found, include_line=False)

        if params.next_step_required:
            prompt += "### Next Validation Phase\n"
            prompt += "Continue validation by:\n"
            prompt += "- Examining additional changes\n"
            prompt += "- Checking for related issues\n"
            prompt += "- Verifying completeness\n"
        else:
            prompt += "### Final Validation\n"
            prompt += "Provide final assessment:\n"
            prompt += "- Is the commit safe to proceed? (Yes/No with explanation)\n"
            prompt += "- Critical blockers that must be addressed\n"
            prompt += "- Recommendations before committing\n"
            prompt += "- Suggested commit message if approved\n"

        return prompt

    def trailer_details(self, params: PrecommitInput) -> list[tuple[str, str]]:
        details = [("Issues Found", str(len(params.issues_found)))]
        if params.path:
            details.append(("Repository", params.path))
        return details
