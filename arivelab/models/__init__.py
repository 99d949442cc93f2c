"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table.
"""
from arivelab.models.user import User, UserRole, AccountStatus
from arivelab.models.registration import UserRegistration
from arivelab.models.content import Category, CategoryType, ContentItem, ContentImage, ContentKind
from arivelab.models.team_member import TeamMember, TeamRole
from arivelab.models.notification import Notification, NotificationType
from arivelab.models.site_setting import SiteSetting
from arivelab.models.audit_log import AuditLog
from arivelab.models.contact_submission import ContactSubmission

__all__ = [
    "User",
    "UserRole",
    "AccountStatus",
    "UserRegistration",
    "Category",
    "CategoryType",
    "ContentItem",
    "ContentImage",
    "ContentKind",
    "TeamMember",
    "TeamRole",
    "Notification",
    "NotificationType",
    "SiteSetting",
    "AuditLog",
    "ContactSubmission",
]
