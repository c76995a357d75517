from training_admin.models.module import Module
from training_admin.models.topic import Topic
from training_admin.models.sub_topic import SubTopic
from training_admin.models.question import Question
from training_admin.models.permission import Permission
from training_admin.models.role import Role, role_permissions
from training_admin.models.state import State
from training_admin.models.range import Range
from training_admin.models.district import District
from training_admin.models.user import User
from training_admin.models.refresh_token import RefreshToken
from training_admin.models.audit_log import AuditLog

__all__ = [
    "Module",
    "Topic",
    "SubTopic",
    "Question",
    "Permission",
    "Role",
    "role_permissions",
    "State",
    "Range",
    "District",
    "User",
    "RefreshToken",
    "AuditLog",
]
