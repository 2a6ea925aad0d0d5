"""
Stage-aware CloudFormation stack
"""
import logging
from typing import Dict, Any, Union

import aws_cdk as cdk
from constructs import Construct

from serverless_stack.app import get_app

logger = logging.getLogger(__name__)

OutputValue = Union[str, Dict[str, Any], cdk.CfnOutputProps]


class Stack(cdk.Stack):
    """Stack whose id and environment come from the enclosing App"""

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        root = get_app(scope)
        stack_id = root.logical_prefixed_name(construct_id)

        kwargs.setdefault(
            "env", cdk.Environment(account=root.account_id, region=root.region_name)
        )

        super().__init__(scope, stack_id, **kwargs)

        self.stage = root.stage

    def add_outputs(self, outputs: Dict[str, OutputValue]) -> None:
        """
        Add CloudFormation outputs to the stack

        Args:
            outputs: Output name mapped to either a value, a dict of
                CfnOutput keyword arguments, or CfnOutputProps
        """
        for key, output in outputs.items():
            if isinstance(output, str):
                cdk.CfnOutput(self, key, value=output)
            elif isinstance(output, dict):
                cdk.CfnOutput(self, key, **output)
            elif isinstance(output, cdk.CfnOutputProps):
                cdk.CfnOutput(
                    self,
                    key,
                    value=output.value,
                    export_name=output.export_name,
                    description=output.description,
                    condition=output.condition
                )
            else:
                raise TypeError(
                    f'Unsupported value for the "{key}" output: {type(output).__name__}'
                )

            logger.debug(f"Added output {key} to {self.stack_name}")
