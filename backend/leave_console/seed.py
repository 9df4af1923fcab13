"""Demo data for running the console without an HR backend.

When ``LEAVES_API_URL`` is unset the app serves the in-memory stubs built
here, so every tab has something to show.
"""

from __future__ import annotations

from datetime import date

from leave_console.models.enums import AccrualMethod, AttachmentType, RoundingRule
from leave_console.schemas.access import RoleUser
from leave_console.schemas.calendar import BlockedPeriod, LeaveCalendar
from leave_console.schemas.employee import EmployeeOption
from leave_console.schemas.entitlement import Entitlement
from leave_console.schemas.leave_type import Eligibility
from leave_console.schemas.policy import LeavePolicy, Position
from leave_console.services.employee import InMemoryEmployeeDirectory
from leave_console.services.leaves_stub import InMemoryLeavesApi

# Well-known employee ids
ALICE_ID = "64f000000000000000000002"
BOB_ID = "64f000000000000000000003"
CAROL_ID = "64f000000000000000000004"
ADMIN_ID = "64f000000000000000000001"

EMPLOYEES = [
    {"_id": ALICE_ID, "firstName": "Alice", "lastName": "Johnson", "employeeNumber": "EMP-001"},
    {"_id": BOB_ID, "firstName": "Bob", "lastName": "Smith", "employeeNumber": "EMP-002"},
    {"_id": CAROL_ID, "firstName": "Carol", "lastName": "Williams", "employeeNumber": "EMP-003"},
]


def seeded_leaves_api() -> InMemoryLeavesApi:
    """Build an in-memory leaves backend holding a small demo catalog."""
    api = InMemoryLeavesApi()

    statutory = api.seed_category("Statutory", "Leaves granted by labour law")
    special = api.seed_category("Special", "Case-by-case absences")

    annual = api.seed_type(
        "AL",
        "Annual Leave",
        statutory.id,
        eligibility=Eligibility(min_tenure_months=3, contract_types_allowed=["FULL_TIME_CONTRACT"]),
        min_tenure_months=3,
    )
    sick = api.seed_type(
        "SL",
        "Sick Leave",
        statutory.id,
        requires_attachment=True,
        attachment_type=AttachmentType.MEDICAL,
    )
    api.seed_type("MS", "Mission", special.id, deductible=False)

    policy = LeavePolicy(
        id="64f0000000000000000000a1",
        leave_type_id=annual.id,
        leave_type_name=annual.label,
        accrual_method=AccrualMethod.MONTHLY,
        monthly_rate=1.75,
        carry_forward_allowed=True,
        max_carry_forward=10,
        expiry_after_months=3,
        rounding_rule=RoundingRule.ROUND,
        min_notice_days=7,
    )
    api.policies[policy.id] = policy
    api.positions = [
        Position(id="64f0000000000000000000b1", title="Software Engineer", code="SE"),
        Position(id="64f0000000000000000000b2", title="Team Lead", code="TL"),
    ]

    year = date.today().year
    api.calendars[year] = LeaveCalendar(
        holidays=[date(year, 1, 1), date(year, 5, 1)],
        blocked_periods=[BlockedPeriod(start=date(year, 12, 20), end=date(year, 12, 31), reason="Year-end close")],
    )

    for employee_id in (ALICE_ID, BOB_ID, CAROL_ID):
        api.seed_entitlement(
            Entitlement(employee_id=employee_id, leave_type_id=annual.id, yearly_entitlement=21, remaining=21)
        )
        api.seed_entitlement(
            Entitlement(employee_id=employee_id, leave_type_id=sick.id, yearly_entitlement=10, remaining=10)
        )

    api.seed_user(RoleUser(id=ADMIN_ID, full_name="Hana Admin", email="hr.admin@example.com", role="HR Admin"))
    api.seed_user(
        RoleUser(
            id=ALICE_ID,
            full_name="Alice Johnson",
            email="alice.johnson@example.com",
            employee_number="EMP-001",
            role="department employee",
        )
    )
    return api


def seeded_employee_directory() -> InMemoryEmployeeDirectory:
    """Build an in-memory employee directory with the demo employees."""
    directory = InMemoryEmployeeDirectory()
    for raw in EMPLOYEES:
        directory.seed(EmployeeOption.model_validate(raw))
    return directory
