from serverless_stack.util.permission import Permissions, attach_permissions_to_role

__all__ = ["Permissions", "attach_permissions_to_role"]
