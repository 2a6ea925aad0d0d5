"""
Playground app exercising every construct in a single stack
"""
import serverless_stack as sst
from aws_cdk import aws_sns as sns
from constructs import Construct


class PlaygroundStack(sst.Stack):

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        topic = sns.Topic(self, "Topic")

        queue = sst.Queue(self, "Queue", consumer="src/lambda.handler")
        queue.attach_permissions([topic])

        api = sst.Api(
            self,
            "Api",
            routes={
                "GET /": "src/lambda.handler",
                "POST /notes": {"handler": "src/lambda.handler", "memory_size": 512},
                "$default": "src/lambda.handler",
            },
        )
        api.attach_permissions([queue])

        auth = sst.Auth(
            self,
            "Auth",
            cognito={"sign_in_aliases": {"email": True}},
            google={"client_id": "playground-google-client"},
        )
        auth.attach_permissions_for_auth_users([api])

        self.add_outputs({
            "ApiEndpoint": api.url,
            "QueueUrl": queue.sqs_queue.queue_url,
            "IdentityPoolId": {
                "value": auth.cognito_cfn_identity_pool.ref,
                "export_name": f"{self.stage}-IdentityPoolId",
            },
        })
