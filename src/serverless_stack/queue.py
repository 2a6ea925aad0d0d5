"""
SQS queue construct with an optional Lambda consumer
"""
import logging
from typing import Dict, Any, List, Optional, Union

from aws_cdk import (
    aws_lambda_event_sources as lambda_event_sources,
    aws_sqs as sqs,
)
from constructs import Construct

from serverless_stack.app import get_app
from serverless_stack.function import Function, FunctionDefinition
from serverless_stack.util.permission import Permissions

logger = logging.getLogger(__name__)

# {"function": FunctionDefinition, "consumer_props": {SqsEventSource kwargs}}
QueueConsumerProps = Dict[str, Any]


class Queue(Construct):
    """
    SQS queue with at most one consumer function.

    Permissions attached before the consumer exists are kept and granted to
    the consumer once it is added.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        sqs_queue: Optional[Union[sqs.IQueue, Dict[str, Any]]] = None,
        consumer: Optional[Union[FunctionDefinition, QueueConsumerProps]] = None
    ) -> None:
        super().__init__(scope, construct_id)

        root = get_app(scope)
        self.consumer_function: Optional[Function] = None
        self._permissions_attached_for_all_consumers: List[Permissions] = []

        if sqs_queue is None or isinstance(sqs_queue, dict):
            queue_props = {"queue_name": root.logical_prefixed_name(construct_id)}
            queue_props.update(sqs_queue or {})
            self.sqs_queue = sqs.Queue(self, "Queue", **queue_props)
        elif Construct.is_construct(sqs_queue):
            self.sqs_queue = sqs_queue
        else:
            raise ValueError(
                f'Invalid sqs_queue for the "{construct_id}" Queue, expected a queue construct or a dict of queue props'
            )

        if consumer is not None:
            self.add_consumer(self, consumer)

    def add_consumer(
        self,
        scope: Construct,
        consumer: Union[FunctionDefinition, QueueConsumerProps]
    ) -> None:
        """Create the consumer function and subscribe it to the queue"""
        if self.consumer_function:
            raise ValueError("Cannot configure more than 1 consumer for a Queue")

        if isinstance(consumer, dict) and "function" in consumer:
            definition = consumer["function"]
            consumer_props = consumer.get("consumer_props") or {}
        else:
            definition = consumer
            consumer_props = {}

        self.consumer_function = Function.from_definition(scope, "Consumer", definition)
        self.consumer_function.add_event_source(
            lambda_event_sources.SqsEventSource(self.sqs_queue, **consumer_props)
        )
        logger.debug(f"Added consumer to the {self.node.id} queue")

        for permissions in self._permissions_attached_for_all_consumers:
            self.consumer_function.attach_permissions(permissions)

    def attach_permissions(self, permissions: Permissions) -> None:
        """Grant permissions to the current and any future consumer"""
        if self.consumer_function:
            self.consumer_function.attach_permissions(permissions)

        self._permissions_attached_for_all_consumers.append(permissions)
