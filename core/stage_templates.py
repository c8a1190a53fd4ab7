# core/stage_templates.py

"""
Standard project lifecycle used for every new project.
"""

from typing import List, Optional

from core.utils import slugify, now_ms, today_iso
from models.enums import Role, StageStatus, TaskStatus
from models.stage import Comment, Stage, Task


STANDARD_STAGE_NAMES = [
    "Client Onboarding",
    "Ideation & Concept",
    "Deal Lock",
    "Functional Flow",
    "Final Design",
    "CAD Drawings",
    "3D Visualization",
    "Design Approval",
    "Construction Drawings",
    "Working Drawings",
    "Finish Material Selection",
    "Construction: Foundation",
    "Construction: Structure",
    "Finishing & Interiors",
    "Handover",
    "Maintenance",
    "Documentation & Publications",
]

FIRST_STAGE_ID = slugify(STANDARD_STAGE_NAMES[0])
HANDOVER_STAGE_KEY = "handover"


def generate_standard_stages(
    current_active_id: str = FIRST_STAGE_ID,
    lead_name: Optional[str] = None,
    start_date: Optional[str] = None,
) -> List[Stage]:
    """
    Build the standard stage list.

    Stages before `current_active_id` are completed, that stage is active,
    everything after it is pending. An unknown id leaves every stage
    completed (nothing was found to stop at).

    Each stage gets one review task for the Principal Architect and an
    opening discussion entry when `lead_name` is given.
    """
    stages = []
    found_active = False
    start_date = start_date or today_iso()

    for index, name in enumerate(STANDARD_STAGE_NAMES):
        stage_id = slugify(name)

        if stage_id == current_active_id:
            status = StageStatus.active
            found_active = True
        elif not found_active:
            status = StageStatus.completed
        else:
            status = StageStatus.pending

        review_task = Task(
            id=f"t-{index}-1",
            title=f"Review {name} requirements",
            description=(
                f"Conduct a thorough review of all {name} prerequisites "
                "and ensure alignment with the client brief."
            ),
            benchmark="All stakeholders must sign off on the initial draft.",
            requirements=[
                "Review Client Brief v2",
                "Check local zoning regulations",
                "Prepare initial presentation deck",
            ],
            assigned_to=Role.principal_architect,
            assignee_name=lead_name,
            status=TaskStatus.completed if status == StageStatus.completed else TaskStatus.pending,
            due_date="ASAP",
        )

        discussions = []
        if lead_name:
            discussions.append(Comment(
                id=f"c-{index}",
                author=lead_name,
                role=Role.principal_architect,
                text=f"Starting work on {name}.",
                timestamp=now_ms(),
            ))

        stages.append(Stage(
            id=stage_id,
            name=name,
            status=status,
            description=f"Phase focused on {name.lower()}.",
            tasks=[review_task],
            discussions=discussions,
            start_date=start_date,
        ))

    return stages
