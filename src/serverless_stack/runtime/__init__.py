"""
Helpers for Lambda handlers behind API Gateway
"""
from serverless_stack.runtime.response import (
    create_response,
    create_text_response,
    create_json_response,
    create_error_response,
    handle_error,
    parse_request_body,
    get_path_parameters,
    get_query_parameters,
)
