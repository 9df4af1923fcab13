from __future__ import annotations

import enum


class AccrualMethod(enum.StrEnum):
    """How a leave policy accrues days."""

    MONTHLY = "monthly"
    YEARLY = "yearly"
    PER_TERM = "per-term"


class RoundingRule(enum.StrEnum):
    """How accrued fractional days are rounded."""

    NONE = "none"
    ROUND = "round"
    ROUND_UP = "round_up"
    ROUND_DOWN = "round_down"


class AttachmentType(enum.StrEnum):
    """Kind of supporting document a leave type may require."""

    MEDICAL = "medical"
    DOCUMENT = "document"
    OTHER = "other"


class AdjustmentType(enum.StrEnum):
    """Manual balance adjustment applied by HR."""

    ADD = "add"
    DEDUCT = "deduct"
    ENCASHMENT = "encashment"


class ResetStrategy(enum.StrEnum):
    """Anchor used when resetting the leave year."""

    HIRE_DATE = "hireDate"
    CALENDAR_YEAR = "calendarYear"
    CUSTOM = "custom"


class ConfigTab(enum.StrEnum):
    """Tabs of the leaves configuration console."""

    CATEGORIES = "categories"
    TYPES = "types"
    POLICIES = "policies"
    ELIGIBILITY = "eligibility"
    CALENDAR = "calendar"
    ACCRUALS = "accruals"
    ENTITLEMENTS = "entitlements"
    MANUAL_ADJUSTMENT = "manual-adjustment"
    RESET = "reset"
    ACCESS_CONTROL = "access-control"


class SystemRole(enum.StrEnum):
    """Roles issued by the HR platform's identity service."""

    DEPARTMENT_EMPLOYEE = "department employee"
    DEPARTMENT_HEAD = "department head"
    HR_MANAGER = "HR Manager"
    HR_EMPLOYEE = "HR Employee"
    PAYROLL_SPECIALIST = "Payroll Specialist"
    PAYROLL_MANAGER = "Payroll Manager"
    SYSTEM_ADMIN = "System Admin"
    LEGAL_POLICY_ADMIN = "Legal & Policy Admin"
    RECRUITER = "Recruiter"
    FINANCE_STAFF = "Finance Staff"
    JOB_CANDIDATE = "Job Candidate"
    HR_ADMIN = "HR Admin"


class AppRole(enum.StrEnum):
    """Coarse leave-management roles shown on the access control tab."""

    HR_ADMIN = "HR_ADMIN"
    HR_MANAGER = "HR_MANAGER"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"
