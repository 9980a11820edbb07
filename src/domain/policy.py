from collections.abc import Sequence

from src.domain.entities import Page, User
from src.rules.models import Rules


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    def check_permission(
        self,
        user: User | None,
        user_roles: Sequence[str],
        action: str,
    ) -> bool:
        """
        Check if the user/role is allowed to perform the action.

        Order of precedence:
        1. Public Permissions (Global)
        2. Role-Based Access Control (RBAC)
        """
        # 1. Public Permissions
        if action in self.rules.rbac.public_permissions:
            return True

        # If not public, we need an active user
        if not user or user.status != "active":
            return False

        # 2. RBAC
        for role in user_roles:
            allowed_actions = self.rules.rbac.roles.get(role, [])
            if "*" in allowed_actions:
                return True
            if action in allowed_actions:
                return True

            # Scoped wildcards (e.g. "page:*" matches "page:view")
            if ":" in action:
                scope = action.split(":")[0]
                if f"{scope}:*" in allowed_actions:
                    return True

        return False

    def can_view_page(self, user: User | None, page: Page) -> bool:
        """
        Visibility gate for a page.

        - public: anyone
        - logged_in: any active user
        - restricted: users holding page:view
        """
        if page.visibility == "public":
            return True
        if page.visibility == "logged_in":
            return user is not None and user.status == "active"
        roles = user.roles if user else []
        return self.check_permission(user, roles, "page:view")

    def can_edit_page(self, user: User | None) -> bool:
        roles = user.roles if user else []
        return self.check_permission(user, roles, "page:edit")

    def can_use_editor(self, user: User | None) -> bool:
        roles = user.roles if user else []
        return self.check_permission(user, roles, "editor:use")
