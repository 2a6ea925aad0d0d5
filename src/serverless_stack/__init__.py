"""
Serverless Stack resources
Higher level AWS CDK constructs for building serverless apps
"""
from serverless_stack.app import App
from serverless_stack.stack import Stack
from serverless_stack.function import Function
from serverless_stack.queue import Queue
from serverless_stack.auth import Auth
from serverless_stack.api import Api

__version__ = "0.1.0"

__all__ = [
    "App",
    "Stack",
    "Function",
    "Queue",
    "Auth",
    "Api",
]
