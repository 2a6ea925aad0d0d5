"""
Attach permissions to IAM roles
Translates the permission shorthand used across constructs into policy statements
"""
import logging
from typing import List, Any, Union

from aws_cdk import (
    Stack,
    aws_dynamodb as dynamodb,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_s3 as s3,
    aws_sns as sns,
    aws_sqs as sqs,
)

logger = logging.getLogger(__name__)

Permissions = Union[str, List[Any]]


def build_policy(actions: Union[str, List[str]], resources: List[str]) -> iam.PolicyStatement:
    """Build an allow statement for the given actions and resources"""
    if isinstance(actions, str):
        actions = [actions]

    return iam.PolicyStatement(
        effect=iam.Effect.ALLOW,
        actions=actions,
        resources=resources
    )


def attach_permissions_to_role(role: iam.IRole, permissions: Permissions) -> None:
    """
    Attach permissions to a role

    Args:
        role: Role to grant the permissions to
        permissions: "*" for full access, or a list of service names,
            policy statements, constructs, or (construct, grant method) pairs
    """
    if permissions == "*":
        role.add_to_principal_policy(build_policy("*", ["*"]))
        return

    if not isinstance(permissions, (list, tuple)):
        raise ValueError(
            'The specified permissions are not supported. They are expected to be "*" or a list.'
        )

    for permission in permissions:
        for statement in _permission_to_statements(role, permission):
            role.add_to_principal_policy(statement)


def _permission_to_statements(role: iam.IRole, permission: Any) -> List[iam.PolicyStatement]:
    # Deferred to avoid a cycle: these constructs attach permissions themselves
    from serverless_stack.api import Api
    from serverless_stack.queue import Queue

    if isinstance(permission, str):
        return [build_policy(f"{permission}:*", ["*"])]

    if isinstance(permission, iam.PolicyStatement):
        return [permission]

    if isinstance(permission, (list, tuple)) and len(permission) == 2:
        construct, method_name = permission
        grant = getattr(construct, method_name, None)
        if not callable(grant):
            raise ValueError(
                f'The "{method_name}" method is not available on the {type(construct).__name__} construct'
            )
        logger.debug(f"Granting {method_name} on {construct.node.id}")
        grant(role)
        return []

    if isinstance(permission, sns.Topic):
        return [build_policy("sns:*", [permission.topic_arn])]

    if isinstance(permission, s3.Bucket):
        return [build_policy("s3:*", [permission.bucket_arn, f"{permission.bucket_arn}/*"])]

    if isinstance(permission, sqs.Queue):
        return [build_policy("sqs:*", [permission.queue_arn])]

    if isinstance(permission, dynamodb.Table):
        return [build_policy("dynamodb:*", [permission.table_arn, f"{permission.table_arn}/*"])]

    if isinstance(permission, Queue):
        return [build_policy("sqs:*", [permission.sqs_queue.queue_arn])]

    if isinstance(permission, Api):
        api_arn = Stack.of(permission).format_arn(
            service="execute-api",
            resource=permission.http_api.api_id,
            resource_name="*"
        )
        return [build_policy("execute-api:Invoke", [api_arn])]

    if isinstance(permission, _lambda.Function):
        return [build_policy("lambda:*", [permission.function_arn])]

    raise ValueError(
        f"The specified permissions are not supported: {type(permission).__name__}"
    )
