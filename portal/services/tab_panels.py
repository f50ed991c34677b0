"""
Super-admin settings tabs.

Each tab is backed by its own settings endpoints. The "Application
Submissions" switch on the applications tab has no backing setting: it is
always reported unwired with no value.
"""
from sqlalchemy.orm import Session

from portal.schemas.settings import TabPanel, TabPanelsResponse, TabToggle
from portal.services import settings_service


def list_tabs(db: Session, super_admin_id: str) -> TabPanelsResponse:
    review_assignment = settings_service.get_review_assignment_enabled(db, super_admin_id)
    return TabPanelsResponse(
        tabs=[
            TabPanel(
                key="questions",
                title="Questions",
                description="Short-answer questions shown to applicants.",
            ),
            TabPanel(
                key="set-admin",
                title="Set Admin",
                description="Look up users by email and change their role.",
            ),
            TabPanel(
                key="reviews-per-app",
                title="Reviews per Application",
                description="How many reviews each application needs.",
                toggles=[
                    TabToggle(
                        key="review_assignment_enabled",
                        label="Review Assignment",
                        description="When enabled, reviews are assigned to admins.",
                        wired=True,
                        value=review_assignment,
                    )
                ],
            ),
            TabPanel(
                key="applications",
                title="Applications",
                description="Manage applications, and enable or disable them.",
                toggles=[
                    TabToggle(
                        key="application_submissions",
                        label="Application Submissions",
                        description="When enabled, hackers can submit their applications.",
                        wired=False,
                    )
                ],
            ),
        ]
    )
