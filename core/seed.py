# core/seed.py

"""
Static studio data loaded into the store at startup.
"""

from typing import List

from core.stage_templates import generate_standard_stages
from core.utils import now_ms
from models.enums import AssetType, NotificationType, Role, StageStatus
from models.financials import ProjectFinancials, Transaction
from models.project import Project
from models.stage import Asset, Stage
from models.studio import Notification, StudioProfile
from models.team import TeamMember


LEAD_ARCHITECT = "Sadia Rahman"
SEED_DUE_DATE = "2024-06-01"


# -----------------------------------------------------
# Stage content per keyword in the stage name
# -----------------------------------------------------
_STAGE_ASSETS = {
    "Ideation": [
        ("Moodboard v1", AssetType.image, "https://picsum.photos/400/300?random=10", LEAD_ARCHITECT, "2023-11-20", 5242880),
        ("Initial Sketches", AssetType.pdf, "#", LEAD_ARCHITECT, "2023-11-22", 12582912),
    ],
    "CAD": [
        ("Floor Plan L1", AssetType.cad, "#", LEAD_ARCHITECT, "2024-01-15", 45000000),
    ],
    "3D": [
        ("Exterior Render", AssetType.model_3d, "https://picsum.photos/400/300?random=11", "Visual Team", "2024-02-01", 250000000),
    ],
    "Construction": [
        ("Site Inspection", AssetType.image, "https://picsum.photos/400/300?random=12", "Marcus Johnson", "2024-03-10", 8500000),
    ],
}


def _seed_stages(current_stage_id: str) -> List[Stage]:
    stages = generate_standard_stages(current_stage_id, lead_name=LEAD_ARCHITECT, start_date="2024-01-01")

    for index, stage in enumerate(stages):
        for task in stage.tasks:
            task.due_date = SEED_DUE_DATE

        if stage.status == StageStatus.pending:
            continue

        for keyword, assets in _STAGE_ASSETS.items():
            if keyword not in stage.name:
                continue
            for n, (title, kind, url, by, day, size) in enumerate(assets, start=1):
                stage.assets.append(Asset(
                    id=f"a-{index}-{n}",
                    title=title,
                    type=kind,
                    url=url,
                    uploaded_by=by,
                    upload_date=day,
                    size=size,
                ))

    return stages


def _tx(tx_id, day, description, amount, kind, status, reference=None) -> Transaction:
    return Transaction(
        id=tx_id, date=day, description=description, amount=amount,
        type=kind, status=status, reference=reference,
    )


def seed_projects() -> List[Project]:
    return [
        Project(
            id="1",
            name="Meghna Riverside Residence",
            location="Dhaka, BD",
            client_name="Jamal Ahmed",
            client_point_of_contact="Mrs. Ahmed (Wife)",
            type="Residential",
            classification="Private",
            square_footage=4500,
            budget=25000000,
            financials=ProjectFinancials(
                total_invoiced=12000000,
                total_collected=10000000,
                total_expenses=8500000,
                pending_bills=2000000,
                transactions=[
                    _tx("tx1", "2023-10-01", "Initial Mobilization", 5000000, "invoice", "paid"),
                    _tx("tx2", "2023-10-05", "Payment Received", 5000000, "payment", "paid", "CHK-992"),
                    _tx("tx3", "2024-01-15", "Foundation Completion", 7000000, "invoice", "paid"),
                    _tx("tx4", "2024-02-01", "Partial Payment", 5000000, "payment", "paid", "TRF-123"),
                ],
            ),
            current_stage_id="construction-structure",
            stages=_seed_stages("construction-structure"),
            documents=[
                Asset(id="d1", title="Site Safety Plan", type=AssetType.pdf, uploaded_by=LEAD_ARCHITECT,
                      upload_date="2023-11-01", size=2400000, verification_status="none"),
                Asset(id="d2", title="BOQ_Final_v3.xlsx", type=AssetType.document, uploaded_by=LEAD_ARCHITECT,
                      upload_date="2023-11-15", size=850000, verification_status="none"),
                Asset(id="d3", title="Signed Agreement", type=AssetType.pdf, uploaded_by="Jamal Ahmed",
                      upload_date="2023-10-25", size=1200000, verification_status="verified"),
            ],
            thumbnail_url="https://picsum.photos/800/600?random=1",
            team={
                Role.principal_architect.value: LEAD_ARCHITECT,
                Role.junior_architect.value: "Emily Davis",
                Role.structural_engineer.value: "Tanvir Hasan",
                Role.site_engineer.value: "Marcus Johnson",
                Role.client.value: "Jamal Ahmed",
                Role.account_manager.value: "Amanda Lewis",
                Role.head_carpenter.value: "Rahim Miah",
                Role.site_documentation.value: "Alex Lens",
            },
        ),
        Project(
            id="2",
            name="The Glass Pavilion",
            location="Gulshan-2, Dhaka",
            client_name="Technovista Ltd",
            client_point_of_contact="Mr. Rafiq (CTO)",
            type="Commercial",
            classification="Semi-Public",
            square_footage=12000,
            budget=80000000,
            financials=ProjectFinancials(
                total_invoiced=1500000,
                total_collected=1000000,
                total_expenses=500000,
                pending_bills=500000,
                transactions=[
                    _tx("tx5", "2024-03-01", "Design Consultation Fee", 1500000, "invoice", "pending"),
                    _tx("tx6", "2024-03-10", "Advance Payment", 1000000, "payment", "paid"),
                ],
            ),
            current_stage_id="ideation-concept",
            stages=_seed_stages("ideation-concept"),
            thumbnail_url="https://picsum.photos/800/600?random=2",
            team={
                Role.principal_architect.value: LEAD_ARCHITECT,
                Role.senior_architect.value: "James Wilson",
                Role.client.value: "Elara Vance",
                Role.marketing.value: "Creative Agency X",
                Role.business_analyst.value: "Tom Baker",
            },
        ),
        Project(
            id="3",
            name="Urban Loft Renovation",
            location="Banani, Dhaka",
            client_name="Liam Smith",
            client_point_of_contact="Liam Smith",
            type="Residential",
            classification="Private",
            square_footage=1800,
            budget=4500000,
            financials=ProjectFinancials(
                total_invoiced=4000000,
                total_collected=4000000,
                total_expenses=2800000,
                pending_bills=0,
                transactions=[
                    _tx("tx7", "2024-01-01", "Full Project Fee", 4000000, "invoice", "paid"),
                    _tx("tx8", "2024-01-02", "Full Payment", 4000000, "payment", "paid"),
                ],
            ),
            current_stage_id="handover",
            stages=_seed_stages("handover"),
            thumbnail_url="https://picsum.photos/800/600?random=3",
            team={
                Role.principal_architect.value: LEAD_ARCHITECT,
                Role.photographer.value: "LensCraft Studios",
                Role.account_manager.value: "Amanda Lewis",
                Role.award_submission.value: LEAD_ARCHITECT,
            },
        ),
        Project(
            id="4",
            name="Central City Hospital Wing",
            location="Chittagong",
            client_name="HealthFirst Systems",
            client_point_of_contact="Dr. Zafar",
            type="Healthcare",
            classification="Public",
            square_footage=45000,
            budget=120000000,
            financials=ProjectFinancials(
                total_invoiced=20000000,
                total_collected=18000000,
                total_expenses=15000000,
                pending_bills=2000000,
            ),
            current_stage_id="functional-flow",
            stages=_seed_stages("functional-flow"),
            thumbnail_url="https://picsum.photos/800/600?random=4",
            team={
                Role.principal_architect.value: LEAD_ARCHITECT,
                Role.project_manager.value: "Kenji Sato",
                Role.main_engineer.value: "Tanvir Hasan",
                Role.account_manager.value: "Amanda Lewis",
                Role.construction_manager.value: "Bill Gates (Simulated)",
            },
        ),
        Project(
            id="5",
            name="Grand Horizon Hotel",
            location="Cox's Bazar",
            client_name="Horizon Group",
            client_point_of_contact="Director of Ops",
            type="Hospitality",
            classification="Semi-Public",
            square_footage=85000,
            budget=350000000,
            financials=ProjectFinancials(
                total_invoiced=5000000,
                total_collected=5000000,
                total_expenses=1000000,
                pending_bills=0,
            ),
            current_stage_id="client-onboarding",
            stages=_seed_stages("client-onboarding"),
            thumbnail_url="https://picsum.photos/800/600?random=5",
            team={
                Role.principal_architect.value: LEAD_ARCHITECT,
                Role.marketing.value: "Creative Agency X",
                Role.developer.value: "Horizon Dev Team",
            },
        ),
    ]


def _member(member_id, name, role, email, cost, status, joined) -> TeamMember:
    return TeamMember(
        id=member_id, name=name, role=role, email=email,
        monthly_cost=cost, status=status, joined_date=joined,
    )


def seed_team_members() -> List[TeamMember]:
    return [
        _member("m1", LEAD_ARCHITECT, Role.principal_architect, "sadia@blueprint.os", 85000, "active", "2022-03-15"),
        _member("m2", "Tanvir Hasan", Role.structural_engineer, "tanvir@blueprint.os", 72000, "active", "2022-06-01"),
        _member("m3", "Marcus Johnson", Role.site_engineer, "marcus@blueprint.os", 60000, "active", "2023-01-10"),
        _member("m4", "Amanda Lewis", Role.account_manager, "amanda@blueprint.os", 55000, "active", "2023-05-20"),
        _member("m5", "LensCraft Studios", Role.photographer, "contact@lenscraft.com", 20000, "active", "2024-02-01"),
        _member("m6", "Creative Agency X", Role.marketing, "hello@agencyx.com", 45000, "active", "2024-01-15"),
        _member("m7", "Rahim Miah", Role.head_carpenter, "rahim@works.com", 12000, "active", "2024-03-01"),
        _member("m8", "Emily Davis", Role.junior_architect, "emily@blueprint.os", 35000, "active", "2023-09-01"),
        _member("m9", "Kenji Sato", Role.project_manager, "kenji@blueprint.os", 80000, "active", "2023-02-01"),
        _member("m10", "Sarah Jenkins", Role.senior_architect, "sarah.j@blueprint.os", 75000, "inactive", "2021-01-15"),
    ]


def seed_studio_profile() -> StudioProfile:
    return StudioProfile(
        name="Blueprint Architects Studio",
        tagline="Designing the future, one blueprint at a time.",
        description=(
            "Founded in 2015, Blueprint Architects Studio is an award-winning multidisciplinary "
            "firm specializing in sustainable residential complexes and high-tech commercial spaces."
        ),
        website="www.blueprint-studio.com",
        email="hello@blueprint-studio.com",
        location="Dhaka, Bangladesh",
        founded_year=2015,
        logo_url="https://via.placeholder.com/150",
        hero_image_url="https://picsum.photos/1200/400?grayscale",
        specialties=["Residential", "Sustainable Design", "Urban Planning"],
    )


def seed_notifications() -> List[Notification]:
    now = now_ms()
    return [
        Notification(
            id="n1", title="Phase Complete",
            message="Ideation phase for Meghna Riverside Residence has been marked complete.",
            timestamp=now - 3600000, type=NotificationType.success, project_id="1",
        ),
        Notification(
            id="n2", title="Pending Approval",
            message="New CAD drawings uploaded for The Glass Pavilion require review.",
            timestamp=now - 7200000, type=NotificationType.info, project_id="2",
        ),
        Notification(
            id="n3", title="System Maintenance",
            message="Scheduled maintenance on Saturday 10 PM.",
            timestamp=now - 86400000, read=True, type=NotificationType.warning,
        ),
    ]
