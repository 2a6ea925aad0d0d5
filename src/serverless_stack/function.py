"""
Lambda function construct with project-relative handlers
"""
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

from aws_cdk import (
    Duration,
    aws_lambda as _lambda,
)
from constructs import Construct

from serverless_stack.util.permission import Permissions, attach_permissions_to_role

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_SIZE = 1024
DEFAULT_TIMEOUT = 10

# Never packaged with the function code
ASSET_EXCLUDES = [
    "cdk.out",
    ".build",
    ".git",
    ".venv",
    "node_modules",
    "__pycache__",
]

FunctionDefinition = Union[str, Dict[str, Any], "Function"]


class Function(_lambda.Function):
    """
    Lambda function defined by a handler path relative to src_path.

    The handler is written as "<module path>.<function name>", for example
    "src/lambda.handler" resolves to src/lambda.py in src_path.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        handler: str = None,
        src_path: str = ".",
        runtime: _lambda.Runtime = None,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        timeout: Union[int, float, Duration] = DEFAULT_TIMEOUT,
        tracing: _lambda.Tracing = _lambda.Tracing.ACTIVE,
        permissions: Optional[Permissions] = None,
        **kwargs
    ) -> None:
        runtime = runtime or _lambda.Runtime.PYTHON_3_12

        if not handler:
            raise ValueError(f'No handler defined for the "{construct_id}" Lambda function')
        if not Path(src_path).is_dir():
            raise ValueError(
                f'No path found at "{src_path}" for the "{construct_id}" Lambda function'
            )
        if runtime.family == _lambda.RuntimeFamily.PYTHON:
            _check_python_handler(construct_id, src_path, handler)

        if isinstance(timeout, (int, float)):
            timeout = Duration.seconds(timeout)

        super().__init__(
            scope,
            construct_id,
            code=_lambda.Code.from_asset(src_path, exclude=ASSET_EXCLUDES),
            handler=handler,
            runtime=runtime,
            memory_size=memory_size,
            timeout=timeout,
            tracing=tracing,
            **kwargs
        )

        if permissions:
            self.attach_permissions(permissions)

    def attach_permissions(self, permissions: Permissions) -> None:
        """Grant the function's execution role access to the given resources"""
        attach_permissions_to_role(self.role, permissions)

    @staticmethod
    def from_definition(
        scope: Construct,
        construct_id: str,
        definition: FunctionDefinition,
        default_props: Optional[Dict[str, Any]] = None
    ) -> "Function":
        """
        Build a Function from a handler string, a dict of Function
        arguments, or return an existing Function unchanged
        """
        if isinstance(definition, str):
            return Function(scope, construct_id, **{**(default_props or {}), "handler": definition})
        if isinstance(definition, Function):
            return definition
        if isinstance(definition, _lambda.Function):
            raise ValueError(
                f'Please use serverless_stack.Function instead of aws_lambda.Function '
                f'for the "{construct_id}" function'
            )
        if isinstance(definition, dict) and definition.get("handler"):
            return Function(scope, construct_id, **{**(default_props or {}), **definition})

        raise ValueError(f'Invalid function definition for the "{construct_id}" function')


def _check_python_handler(construct_id: str, src_path: str, handler: str) -> None:
    module_path, _, function_name = handler.rpartition(".")
    if not module_path or not function_name:
        raise ValueError(
            f'Invalid handler "{handler}" for the "{construct_id}" Lambda function, '
            f'expected "<module>.<function>"'
        )

    handler_file = Path(src_path) / f"{module_path.replace('.', '/')}.py"
    if not handler_file.exists():
        raise ValueError(
            f'Cannot find a handler file at "{handler_file}" for the "{construct_id}" Lambda function'
        )

    logger.debug(f"Resolved handler {handler} to {handler_file}")
