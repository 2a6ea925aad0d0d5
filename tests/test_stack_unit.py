"""
Unit tests for the Stack construct
Tests stage-aware naming and CloudFormation outputs
"""
import pytest
import aws_cdk as cdk
from aws_cdk import aws_sns as sns
from aws_cdk.assertions import Template

from serverless_stack import App, Stack


@pytest.mark.unit
class TestStackNaming:
    """Test stack ids and environment"""

    def test_stack_in_nested_stage(self, project_dir):
        """Test the stage is read from the App through a cdk.Stage"""
        app = App()
        stage = cdk.Stage(app, "stage")
        stack = Stack(stage, "stack")

        assert app.stage == "dev"
        assert stack.stage == "dev"

    def test_stack_id_is_prefixed(self, app):
        """Test the stack id includes the stage"""
        stack = Stack(app, "stack")

        assert stack.node.id == "dev-stack"
        assert stack.stack_name == "dev-stack"

    def test_stack_id_includes_app_name(self, project_dir):
        """Test the stack id includes the app name"""
        app = App(stage="prod", name="notes")
        stack = Stack(app, "api")

        assert stack.stack_name == "prod-notes-api"
        assert stack.stage == "prod"

    def test_stack_region_from_app(self, project_dir):
        """Test the stack is deployed to the app region"""
        app = App(region="eu-west-1")
        stack = Stack(app, "stack")

        assert stack.region == "eu-west-1"

    def test_stack_outside_app(self, project_dir):
        """Test a plain cdk.App is rejected"""
        with pytest.raises(ValueError, match="must be created inside"):
            Stack(cdk.App(), "stack")


@pytest.mark.unit
class TestStackOutputs:
    """Test add_outputs"""

    def test_cfn_outputs(self, stack):
        """Test plain values and values with export names"""
        stack.add_outputs({
            "keyA": "valueA",
            "keyB": {"value": "valueB", "export_name": "exportB"},
        })

        template = Template.from_stack(stack)
        template.has_output("keyA", {"Value": "valueA"})
        template.has_output("keyB", {"Value": "valueB", "Export": {"Name": "exportB"}})

    def test_cfn_output_props(self, stack):
        """Test CfnOutputProps values"""
        stack.add_outputs({
            "keyC": cdk.CfnOutputProps(value="valueC", description="Output C"),
        })

        Template.from_stack(stack).has_output(
            "keyC", {"Value": "valueC", "Description": "Output C"}
        )

    def test_token_output(self, stack):
        """Test resource attributes are written as references"""
        topic = sns.Topic(stack, "Topic")
        stack.add_outputs({"TopicArn": topic.topic_arn})

        outputs = Template.from_stack(stack).to_json()["Outputs"]
        assert "Ref" in outputs["TopicArn"]["Value"]

    def test_unsupported_output(self, stack):
        """Test output values of other types are rejected"""
        with pytest.raises(TypeError, match='"keyD" output'):
            stack.add_outputs({"keyD": 42})
