"""
Unit tests for the Function construct
"""
import pytest
from aws_cdk import Duration, aws_lambda as _lambda
from aws_cdk.assertions import Template

from serverless_stack import Function


@pytest.mark.unit
class TestFunction:
    """Test function creation and defaults"""

    def test_defaults(self, stack):
        """Test the default runtime, memory, timeout and tracing"""
        Function(stack, "Function", handler="src/lambda.handler")

        Template.from_stack(stack).has_resource_properties("AWS::Lambda::Function", {
            "Handler": "src/lambda.handler",
            "Runtime": "python3.12",
            "MemorySize": 1024,
            "Timeout": 10,
            "TracingConfig": {"Mode": "Active"},
        })

    def test_overrides(self, stack):
        """Test props passed through to the Lambda function"""
        Function(
            stack,
            "Function",
            handler="src/lambda.handler",
            memory_size=256,
            timeout=Duration.minutes(1),
            environment={"TABLE_NAME": "notes"}
        )

        Template.from_stack(stack).has_resource_properties("AWS::Lambda::Function", {
            "MemorySize": 256,
            "Timeout": 60,
            "Environment": {"Variables": {"TABLE_NAME": "notes"}},
        })

    def test_fractional_timeout(self, stack):
        """Test a float number of seconds is accepted as the timeout"""
        Function(stack, "Function", handler="src/lambda.handler", timeout=30.0)

        Template.from_stack(stack).has_resource_properties(
            "AWS::Lambda::Function", {"Timeout": 30}
        )

    def test_src_path(self, stack, project_dir):
        """Test handlers are resolved relative to src_path"""
        Function(stack, "Function", handler="lambda.handler", src_path=str(project_dir / "src"))

        Template.from_stack(stack).resource_count_is("AWS::Lambda::Function", 1)

    def test_missing_handler(self, stack):
        with pytest.raises(ValueError, match='No handler defined for the "Function"'):
            Function(stack, "Function", handler="")

    def test_missing_src_path(self, stack):
        with pytest.raises(ValueError, match="No path found"):
            Function(stack, "Function", handler="src/lambda.handler", src_path="missing")

    def test_missing_handler_file(self, stack):
        with pytest.raises(ValueError, match="Cannot find a handler file"):
            Function(stack, "Function", handler="src/missing.handler")

    def test_invalid_handler_format(self, stack):
        with pytest.raises(ValueError, match="Invalid handler"):
            Function(stack, "Function", handler="handler")

    def test_permissions_argument(self, stack, policy_statements):
        """Test permissions passed at creation are attached to the role"""
        Function(stack, "Function", handler="src/lambda.handler", permissions=["s3"])

        assert {"Action": "s3:*", "Effect": "Allow", "Resource": "*"} in policy_statements(stack)

    def test_attach_permissions(self, stack, policy_statements):
        """Test permissions attached after creation"""
        function = Function(stack, "Function", handler="src/lambda.handler")
        function.attach_permissions("*")

        assert {"Action": "*", "Effect": "Allow", "Resource": "*"} in policy_statements(stack)


@pytest.mark.unit
class TestFromDefinition:
    """Test building functions from definitions"""

    def test_from_handler_string(self, stack):
        function = Function.from_definition(stack, "Function", "src/lambda.handler")

        assert isinstance(function, Function)
        Template.from_stack(stack).has_resource_properties(
            "AWS::Lambda::Function", {"Handler": "src/lambda.handler"}
        )

    def test_from_dict(self, stack):
        Function.from_definition(
            stack, "Function", {"handler": "src/worker.handler", "memory_size": 512}
        )

        Template.from_stack(stack).has_resource_properties(
            "AWS::Lambda::Function", {"Handler": "src/worker.handler", "MemorySize": 512}
        )

    def test_default_props(self, stack):
        """Test default props apply unless the definition overrides them"""
        Function.from_definition(stack, "A", "src/lambda.handler", {"memory_size": 128})
        Function.from_definition(
            stack, "B", {"handler": "src/worker.handler", "memory_size": 2048}, {"memory_size": 128}
        )

        template = Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::Lambda::Function", {"Handler": "src/lambda.handler", "MemorySize": 128}
        )
        template.has_resource_properties(
            "AWS::Lambda::Function", {"Handler": "src/worker.handler", "MemorySize": 2048}
        )

    def test_from_existing_function(self, stack):
        function = Function(stack, "Function", handler="src/lambda.handler")

        assert Function.from_definition(stack, "Other", function) is function

    def test_from_plain_lambda_function(self, stack):
        function = _lambda.Function(
            stack,
            "Raw",
            code=_lambda.Code.from_inline("def handler(event, context): pass"),
            handler="index.handler",
            runtime=_lambda.Runtime.PYTHON_3_12
        )

        with pytest.raises(ValueError, match="Please use serverless_stack.Function"):
            Function.from_definition(stack, "Other", function)

    @pytest.mark.parametrize("definition", [42, {}, {"memory_size": 512}, None])
    def test_invalid_definition(self, stack, definition):
        with pytest.raises(ValueError, match='Invalid function definition for the "Function"'):
            Function.from_definition(stack, "Function", definition)
