#!/usr/bin/env python3
"""
sst: build, deploy and remove Serverless Stack apps
Wraps the AWS CDK toolkit with stage/region aware stack naming
"""
import sys
import logging
import argparse
import subprocess
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from serverless_stack import config

logger = logging.getLogger(__name__)


class StackDeployer:
    """Runs cdk commands for one stage of a Serverless Stack app"""

    def __init__(
        self,
        stage: Optional[str] = None,
        region: Optional[str] = None,
        app_dir: str = "."
    ):
        project_config = config.load_project_config(f"{app_dir}/{config.CONFIG_FILE_NAME}")

        self.app_dir = app_dir
        self.stage = stage or config.get_setting("stage", None, config.DEFAULT_STAGE, project_config)
        self.region = region or config.get_setting("region", None, config.DEFAULT_REGION, project_config)
        self.name = config.get_setting("name", None, "", project_config)

    def stack_name(self, stack: str) -> str:
        """Full CloudFormation stack name for a stack id"""
        name_prefix = f"{self.name}-" if self.name else ""
        return f"{self.stage}-{name_prefix}{stack}"

    def _context_args(self) -> List[str]:
        return [
            "--context", f"stage={self.stage}",
            "--context", f"region={self.region}"
        ]

    def _stack_args(self, stack: Optional[str]) -> List[str]:
        return [self.stack_name(stack)] if stack else ["--all"]

    def build(self) -> bool:
        """Synthesize the CloudFormation templates"""
        print(f"🔧 Building app for stage {self.stage}...")
        return self._run(["cdk", "synth", "--quiet", *self._context_args()])

    def deploy(self, stack: Optional[str] = None) -> bool:
        """Deploy one stack, or all stacks in the app"""
        print(f"📦 Deploying {self.stack_name(stack) if stack else 'all stacks'} to {self.region}...")
        return self._run([
            "cdk", "deploy", *self._stack_args(stack),
            "--require-approval", "never",
            *self._context_args()
        ])

    def remove(self, stack: Optional[str] = None) -> bool:
        """Destroy one stack, or all stacks in the app"""
        print(f"🗑️ Removing {self.stack_name(stack) if stack else 'all stacks'}...")
        return self._run([
            "cdk", "destroy", *self._stack_args(stack),
            "--force",
            *self._context_args()
        ])

    def get_outputs(self, stack: str) -> Dict[str, str]:
        """Get the outputs of a deployed stack"""
        cloudformation = boto3.client("cloudformation", region_name=self.region)
        response = cloudformation.describe_stacks(StackName=self.stack_name(stack))

        return {
            output["OutputKey"]: output["OutputValue"]
            for output in response["Stacks"][0].get("Outputs", [])
        }

    def _run(self, cmd: List[str]) -> bool:
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, cwd=self.app_dir)
        except FileNotFoundError:
            print("❌ The AWS CDK toolkit is not installed. Run: npm install -g aws-cdk")
            return False

        if result.returncode != 0:
            print(f"❌ {cmd[1]} failed:")
            print(result.stderr)
            return False

        if result.stdout:
            print(result.stdout)
        print(f"✅ {cmd[1]} completed!")
        return True


def main(argv: List[str] = None):
    """sst entry point"""
    parser = argparse.ArgumentParser(description="Build and deploy Serverless Stack apps")
    parser.add_argument(
        "command",
        choices=["build", "deploy", "remove", "outputs"],
        help="Command to run"
    )
    parser.add_argument(
        "stack",
        nargs="?",
        help="Stack to deploy, remove or show outputs for (default: all stacks)"
    )
    parser.add_argument(
        "--stage",
        help="Stage to use (default: from sst.json, or dev)"
    )
    parser.add_argument(
        "--region",
        help="AWS region to use (default: from sst.json, or us-east-1)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        deployer = StackDeployer(stage=args.stage, region=args.region)
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.command == "outputs":
        if not args.stack:
            parser.error("outputs requires a stack name")
        try:
            outputs = deployer.get_outputs(args.stack)
        except (ClientError, BotoCoreError) as e:
            print(f"❌ Could not get outputs for {deployer.stack_name(args.stack)}: {e}")
            sys.exit(1)

        for key, value in outputs.items():
            print(f"{key}: {value}")
        sys.exit(0)

    if args.command == "build":
        success = deployer.build()
    elif args.command == "deploy":
        success = deployer.deploy(args.stack)
    else:
        success = deployer.remove(args.stack)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
