"""
HTTP API construct mapping routes to Lambda functions
"""
import re
import logging
from typing import Dict, Any, Optional, Tuple, Union

from aws_cdk import (
    aws_apigatewayv2 as apigwv2,
    aws_apigatewayv2_integrations as integrations,
)
from constructs import Construct

from serverless_stack.app import get_app
from serverless_stack.function import Function, FunctionDefinition
from serverless_stack.util.permission import Permissions

logger = logging.getLogger(__name__)

DEFAULT_ROUTE = "$default"


def parse_route_key(route_key: str) -> Tuple[Optional[apigwv2.HttpMethod], Optional[str]]:
    """
    Split a route key like "GET /notes/{id}" into its method and path

    Returns (None, None) for the $default route.
    """
    if route_key == DEFAULT_ROUTE:
        return None, None

    parts = route_key.split()
    if len(parts) != 2:
        raise ValueError(f'Invalid route "{route_key}", expected "<METHOD> <path>"')

    method_name, path = parts
    method_name = method_name.upper()
    if method_name not in apigwv2.HttpMethod.__members__:
        raise ValueError(f'Invalid method defined for "{route_key}"')
    if not path.startswith("/"):
        raise ValueError(f'Invalid path defined for "{route_key}"')

    return apigwv2.HttpMethod[method_name], path


def route_construct_id(route_key: str) -> str:
    """Construct id for a route's function, e.g. "GET /notes" -> "Lambda_GET_notes" """
    return "Lambda_" + re.sub(r"[^A-Za-z0-9$]+", "_", route_key).strip("_")


class Api(Construct):
    """HTTP API (API Gateway v2) whose routes are served by Lambda functions"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        routes: Optional[Dict[str, FunctionDefinition]] = None,
        http_api: Optional[Union[apigwv2.HttpApi, Dict[str, Any]]] = None,
        default_function_props: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(scope, construct_id)

        root = get_app(scope)
        self.default_function_props = default_function_props or {}
        self.functions_by_route: Dict[str, Function] = {}
        self._permissions_attached_for_all_routes = []

        if isinstance(http_api, apigwv2.HttpApi):
            self.http_api = http_api
        else:
            api_props = {"api_name": root.logical_prefixed_name(construct_id)}
            api_props.update(http_api or {})
            self.http_api = apigwv2.HttpApi(self, "Api", **api_props)

        if routes:
            self.add_routes(self, routes)

    @property
    def url(self) -> str:
        return self.http_api.api_endpoint

    def add_routes(self, scope: Construct, routes: Dict[str, FunctionDefinition]) -> None:
        """Create a function and integration for each route"""
        for route_key, definition in routes.items():
            self._add_route(scope, route_key, definition)

    def _add_route(self, scope: Construct, route_key: str, definition: FunctionDefinition) -> Function:
        if route_key in self.functions_by_route:
            raise ValueError(f'A route for "{route_key}" already exists in the "{self.node.id}" Api')

        method, path = parse_route_key(route_key)
        function = Function.from_definition(
            scope,
            route_construct_id(route_key),
            definition,
            self.default_function_props
        )
        integration = integrations.HttpLambdaIntegration(
            f"Integration_{route_construct_id(route_key)}", function
        )

        if method is None:
            apigwv2.HttpRoute(
                self,
                "Route_default",
                http_api=self.http_api,
                route_key=apigwv2.HttpRouteKey.DEFAULT,
                integration=integration
            )
        else:
            self.http_api.add_routes(path=path, methods=[method], integration=integration)

        for permissions in self._permissions_attached_for_all_routes:
            function.attach_permissions(permissions)

        self.functions_by_route[route_key] = function
        logger.debug(f"Added route {route_key} to the {self.node.id} Api")
        return function

    def get_function(self, route_key: str) -> Function:
        if route_key not in self.functions_by_route:
            raise ValueError(f'Failed to find a route for "{route_key}" in the "{self.node.id}" Api')
        return self.functions_by_route[route_key]

    def attach_permissions(self, permissions: Permissions) -> None:
        """Grant permissions to every route function, including ones added later"""
        for function in self.functions_by_route.values():
            function.attach_permissions(permissions)

        self._permissions_attached_for_all_routes.append(permissions)

    def attach_permissions_to_route(self, route_key: str, permissions: Permissions) -> None:
        self.get_function(route_key).attach_permissions(permissions)
