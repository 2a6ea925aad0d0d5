"""
HTTP response utilities for Lambda handlers behind API Gateway
Builds APIGatewayProxyResult-shaped dicts: statusCode, body and headers
"""
import json
import logging
from typing import Dict, Any, Optional, Union

logger = logging.getLogger(__name__)


def create_response(
    status_code: int,
    body: Union[str, Dict[str, Any], list] = "",
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Create a proxy result; non-string bodies are serialized as JSON"""
    if isinstance(body, str):
        default_headers = {'Content-Type': 'text/plain'}
    else:
        default_headers = {'Content-Type': 'application/json'}
        body = json.dumps(body, default=str)  # default=str handles datetime serialization

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'body': body,
        'headers': default_headers
    }


def create_text_response(text: str, status_code: int = 200) -> Dict[str, Any]:
    return create_response(status_code, text)


def create_json_response(data: Any, status_code: int = 200) -> Dict[str, Any]:
    return create_response(
        status_code,
        json.dumps(data, default=str),
        {'Content-Type': 'application/json'}
    )


def create_error_response(
    status_code: int,
    error_message: str,
    error_code: str = None
) -> Dict[str, Any]:
    """Create error response"""
    body = {'error': {'message': error_message}}

    if error_code:
        body['error']['code'] = error_code

    return create_response(status_code, body)


def handle_error(error: Exception) -> Dict[str, Any]:
    """Map an exception raised by a handler to an error response"""
    logger.error(f"Handler error: {error}")

    if isinstance(error, ValueError):
        return create_error_response(400, str(error), 'BAD_REQUEST')
    if isinstance(error, PermissionError):
        return create_error_response(403, str(error), 'FORBIDDEN')
    if isinstance(error, LookupError):
        return create_error_response(404, 'Resource not found', 'NOT_FOUND')

    return create_error_response(500, 'An unexpected error occurred', 'INTERNAL_ERROR')


def parse_request_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Parse the JSON request body from an API Gateway event"""
    body = event.get('body') or '{}'

    if event.get('isBase64Encoded'):
        raise ValueError('Binary request bodies are not supported')

    if isinstance(body, str):
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            raise ValueError('Invalid JSON in request body')

    return body


def get_path_parameters(event: Dict[str, Any]) -> Dict[str, str]:
    """Get path parameters from Lambda event"""
    return event.get('pathParameters') or {}


def get_query_parameters(event: Dict[str, Any]) -> Dict[str, str]:
    """Get query parameters from Lambda event"""
    return event.get('queryStringParameters') or {}
