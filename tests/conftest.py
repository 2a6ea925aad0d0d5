"""
Pytest configuration and fixtures for Serverless Stack resources tests
Provides a throwaway project directory, an App and a Stack for synthesis
"""
import os
import sys
import pytest
from pathlib import Path

# Add src directory to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Stage/name/region resolution reads these, keep them out of the tests
for key in ("SST_STAGE", "SST_NAME", "SST_REGION", "CDK_DEFAULT_ACCOUNT"):
    os.environ.pop(key, None)

HANDLER_SOURCE = '''def handler(event, context):
    return {"statusCode": 200, "body": "ok", "headers": {"Content-Type": "text/plain"}}
'''


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks fast tests that don't synthesize large apps"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that synthesize a complete app"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Empty project with Lambda handlers, used as the working directory"""
    src = tmp_path / "src"
    src.mkdir()
    (src / "lambda.py").write_text(HANDLER_SOURCE)
    (src / "worker.py").write_text(HANDLER_SOURCE)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def app(project_dir):
    """App writing its cloud assembly into the project directory"""
    from serverless_stack import App

    return App(outdir=str(project_dir / "cdk.out"))


@pytest.fixture
def stack(app):
    """Stack named "stack" in the default dev stage"""
    from serverless_stack import Stack

    return Stack(app, "stack")


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials for moto"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def policy_statements():
    """Collect the statements of every IAM policy in a stack's template"""
    from aws_cdk.assertions import Template

    def _collect(stack):
        template = Template.from_stack(stack)
        statements = []
        for resource in template.find_resources("AWS::IAM::Policy").values():
            statements.extend(resource["Properties"]["PolicyDocument"]["Statement"])
        return statements

    return _collect
