"""Multi-model deliberation tool.

A deliberation moves through three phases driven by the caller:
step 1 frames the question, then one call per participant model consults that
model under its stance (the caller increments current_model_index between
calls), and once the index reaches the number of participants the call
synthesizes all the summaries the caller collected.
"""

from conductor_server.models.tools import ConsensusInput
from conductor_server.tools.base import WorkflowTool, bullet_list
from conductor_server.workflow import (
    DeliberationPhase,
    ResolvedConversation,
    deliberation_phase,
)

STANCE_PERSPECTIVES = {
    "for": "Evaluate this from a supportive perspective, highlighting benefits and opportunities.",
    "against": "Evaluate this critically, identifying risks, challenges, and drawbacks.",
    "neutral": "Provide a balanced, objective analysis.",
}


class ConsensusTool(WorkflowTool):
    name = "consensus"
    description = (
        "Builds multi-model consensus through systematic analysis and structured "
        "debate. Use for complex decisions, architectural choices, feature "
        "proposals, and technology evaluations. Consults multiple models with "
        "different stances to synthesize comprehensive recommendations."
    )
    input_model = ConsensusInput
    trailer_title = "Consensus Session Info"

    def phase(self, params: ConsensusInput) -> DeliberationPhase:
        return deliberation_phase(
            params.step_number, params.current_model_index, len(params.models)
        )

    def select_model(self, params: ConsensusInput) -> str:
        # Only consultations go to a participant; framing and synthesis use
        # the caller's model
        if self.phase(params) is DeliberationPhase.CONSULTING:
            return params.models[params.current_model_index].model
        return params.model or self.settings.default_model

    def conversation_metadata(self, params: ConsensusInput) -> dict:
        return {
            "tool": self.name,
            "models": [participant.model_dump() for participant in params.models],
        }

    def system_prompt(self, params: ConsensusInput) -> str | None:
        return (
            "You are facilitating a multi-model consensus process. Provide "
            "structured, evidence-based analysis and help synthesize diverse "
            "perspectives."
        )

    def temperature(self, params: ConsensusInput) -> float | None:
        return 0.7

    def build_prompt(
        self, params: ConsensusInput, conversation: ResolvedConversation
    ) -> str:
        prompt = (
            f"# Multi-Model Consensus - Step {params.step_number}/{params.total_steps}\n\n"
        )
        phase = self.phase(params)

        if phase is DeliberationPhase.FRAMING:
            prompt += f"## Proposal/Question\n\n{params.step}\n\n"
            prompt += "### Models to Consult\n"
            for participant in params.models:
                stance = f" (stance: {participant.stance})" if participant.stance else ""
                prompt += f"- {participant.model}{stance}\n"
            prompt += "\n### Your Initial Analysis\n"
            prompt += "Before consulting other models, provide your own analysis:\n"
            prompt += "- Key considerations\n"
            prompt += "- Potential approaches\n"
            prompt += "- Important factors to evaluate\n\n"
            prompt += f"**Your Findings**: {params.findings}\n"

        elif phase is DeliberationPhase.CONSULTING:
            participant = params.models[params.current_model_index]
            stance = participant.stance or "neutral"

            prompt += f"## Consulting Model: {participant.model}\n\n"
            prompt += f"**Stance**: {stance}\n\n"
            prompt += f"**Question/Proposal**: {params.step}\n\n"
            perspective = participant.stance_prompt or STANCE_PERSPECTIVES[stance]
            prompt += f"**Perspective**: {perspective}\n\n"

            if params.relevant_files:
                prompt += f"**Context Files**:\n{bullet_list(params.relevant_files)}\n\n"

            if params.model_responses:
                prompt += "### Previous Perspectives\n"
                for response in params.model_responses:
                    prompt += (
                        f"**{response.model}** ({response.stance}): {response.summary}\n\n"
                    )

            prompt += "Provide this model's perspective focusing on:\n"
            prompt += f"- Key arguments from the {stance} stance\n"
            prompt += "- Supporting evidence or reasoning\n"
            prompt += "- Important considerations\n\n"
            prompt += f"**Latest Findings**: {params.findings}\n"

        else:
            prompt += "## Consensus Synthesis\n\n"
            prompt += f"**Original Question**: {params.step}\n\n"
            prompt += "### All Perspectives Gathered\n"
            for response in params.model_responses:
                prompt += f"\n**{response.model}** ({response.stance}):\n{response.summary}\n"
            prompt += "\n### Your Final Synthesis\n"
            prompt += "Based on all perspectives, provide:\n"
            prompt += "- Areas of agreement across models\n"
            prompt += "- Key points of disagreement\n"
            prompt += "- Balanced recommendation\n"
            prompt += "- Action items or next steps\n\n"
            prompt += f"**Synthesis**: {params.findings}\n"

        return prompt

    def trailer_details(self, params: ConsensusInput) -> list[tuple[str, str]]:
        phase = self.phase(params)
        if phase is DeliberationPhase.SYNTHESIZING:
            return [("Phase", "Final synthesis")]

        index = min(params.current_model_index, len(params.models) - 1)
        participant = params.models[index]
        label = f"{participant.model} ({participant.stance or 'neutral'})"
        if phase is DeliberationPhase.FRAMING:
            return [("Phase", "Initial analysis"), ("Next Model", label)]
        return [
            ("Current Model", label),
            ("Progress", f"{index + 1}/{len(params.models)} models consulted"),
        ]
