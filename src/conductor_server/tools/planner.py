"""Sequential planning tool with revisions and branches."""

from conductor_server.models.tools import PlannerInput
from conductor_server.tools.base import WorkflowTool
from conductor_server.workflow import ResolvedConversation, StepKind, classify_step


class PlannerTool(WorkflowTool):
    """Builds a plan step by step.

    This is the only tool whose calls can be revisions of an earlier step or
    branches forking from one.
    """

    name = "planner"
    description = (
        "Breaks down complex tasks through interactive, sequential planning with "
        "revision and branching capabilities. Use for complex project planning, "
        "system design, migration strategies, and architectural decisions. Builds "
        "plans incrementally with deep reflection for complex scenarios."
    )
    input_model = PlannerInput
    trailer_title = "Planning Session Info"

    def system_prompt(self, params: PlannerInput) -> str | None:
        return (
            "You are an expert project planner. Provide structured, actionable "
            "plans with clear breakdown of tasks, dependencies, and considerations."
        )

    def temperature(self, params: PlannerInput) -> float | None:
        return 0.6

    def step_kind(self, params: PlannerInput) -> StepKind:
        return classify_step(
            params.step_number,
            is_step_revision=params.is_step_revision,
            revises_step_number=params.revises_step_number,
            is_branch_point=params.is_branch_point,
            branch_id=params.branch_id,
            branch_from_step=params.branch_from_step,
        )

    def build_prompt(
        self, params: PlannerInput, conversation: ResolvedConversation
    ) -> str:
        prompt = f"# Planning Session - Step {params.step_number}/{params.total_steps}\n\n"
        kind = self.step_kind(params)

        if kind is StepKind.INITIAL:
            prompt += f"## Project/Task Overview\n\n{params.step}\n\n"
            prompt += "### Planning Approach\n"
            prompt += "Please provide an initial plan covering:\n"
            prompt += "- High-level goals and objectives\n"
            prompt += "- Key phases or milestones\n"
            prompt += "- Major components or tasks\n"
            prompt += "- Dependencies and constraints\n"
            prompt += "- Potential challenges\n\n"
        elif kind is StepKind.REVISION:
            prompt += "## Plan Revision\n\n"
            prompt += f"Revising step {params.revises_step_number}:\n\n{params.step}\n\n"
            prompt += "### Revision Analysis\n"
            prompt += "Provide updated analysis addressing:\n"
            prompt += "- What changed and why\n"
            prompt += "- Impact on subsequent steps\n"
            prompt += "- Updated approach or recommendations\n\n"
        elif kind is StepKind.BRANCH:
            prompt += f"## Alternative Approach - Branch: {params.branch_id}\n\n"
            prompt += f"Branching from step {params.branch_from_step}:\n\n{params.step}\n\n"
            prompt += "### Branch Exploration\n"
            prompt += "Explore this alternative by:\n"
            prompt += "- Describing the different approach\n"
            prompt += "- Comparing with the main path\n"
            prompt += "- Identifying unique benefits/risks\n"
            prompt += "- Providing recommendations\n\n"
        else:
            prompt += f"## Detailed Planning\n\n{params.step}\n\n"
            prompt += f"### Step {params.step_number} Analysis\n"
            prompt += "Continue planning by:\n"
            prompt += "- Breaking down this phase\n"
            prompt += "- Identifying specific tasks\n"
            prompt += "- Noting dependencies\n"
            prompt += "- Highlighting risks or concerns\n\n"

        if params.findings:
            prompt += f"### Notes\n{params.findings}\n\n"

        if params.next_step_required:
            prompt += "### Next Planning Phase\n"
            prompt += f"Prepare for step {params.step_number + 1} by identifying:\n"
            prompt += "- What needs further breakdown\n"
            prompt += "- Areas requiring more detail\n"
            prompt += "- Open questions to address\n"
        else:
            prompt += "### Final Plan Summary\n"
            prompt += "Provide a comprehensive plan summary including:\n"
            prompt += "- Complete task breakdown\n"
            prompt += "- Execution sequence\n"
            prompt += "- Resource requirements\n"
            prompt += "- Success criteria\n"
            prompt += "- Risk mitigation strategies\n"

        return prompt

    def trailer_details(self, params: PlannerInput) -> list[tuple[str, str]]:
        # Reported whenever the markers are set, whichever kind the step is
        details = []
        if params.is_step_revision and params.revises_step_number:
            details.append(("Revision of step", str(params.revises_step_number)))
        if params.is_branch_point and params.branch_id:
            origin = (
                f" (from step {params.branch_from_step})"
                if params.branch_from_step
                else ""
            )
            details.append(("Branch", f"{params.branch_id}{origin}"))
        return details
