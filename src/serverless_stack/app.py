"""
Root construct for Serverless Stack apps
"""
import logging
from typing import Optional

import aws_cdk as cdk

from serverless_stack import config

logger = logging.getLogger(__name__)


class App(cdk.App):
    """
    CDK App that knows which stage, name and region it is being built for.

    Every construct in this package resolves naming from the App at the root
    of its tree, so stacks have to be created under an App (directly or
    through a cdk.Stage).
    """

    def __init__(
        self,
        *,
        stage: Optional[str] = None,
        name: Optional[str] = None,
        region: Optional[str] = None,
        **kwargs
    ) -> None:
        super().__init__(**kwargs)

        project_config = config.load_project_config()
        context = {
            key: self.node.try_get_context(key)
            for key in ("stage", "name", "region")
        }

        self.stage = stage or config.get_setting(
            "stage", context, config.DEFAULT_STAGE, project_config
        )
        self.name = name or config.get_setting("name", context, "", project_config)
        self.region_name = region or config.get_setting(
            "region", context, config.DEFAULT_REGION, project_config
        )
        self.account_id = config.get_account()

        logger.debug(
            f"Building app '{self.name}' for stage {self.stage} in {self.region_name}"
        )

    def logical_prefixed_name(self, logical_name: str) -> str:
        """Prefix a logical name with the stage and app name"""
        name_prefix = f"{self.name}-" if self.name else ""
        return f"{self.stage}-{name_prefix}{logical_name}"


def get_app(scope) -> App:
    """Get the App at the root of a construct tree"""
    root = scope.node.root
    if not isinstance(root, App):
        raise ValueError(
            f'The "{scope.node.id}" construct must be created inside a serverless_stack App'
        )
    return root
