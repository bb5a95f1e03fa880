"""API Gateway (Lambda proxy) response builders shared by the lambdas.

Every error response carries a JSON body of the form {"message": "<reason>"}.
"""

import json

from quotashortener.types import LambdaResponse


JSON_HEADERS = {'Content-Type': 'application/json'}


def response_json(status_code: int, body: dict) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps(body),
    }


def response_200(body: dict) -> LambdaResponse:
    return response_json(200, body)


def response_400(message: str) -> LambdaResponse:
    return response_json(400, {'message': message})


def response_404(message: str) -> LambdaResponse:
    return response_json(404, {'message': message})


def response_500() -> LambdaResponse:
    return response_json(500, {'message': 'Internal Server Error'})


def response_307(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 307,
        'headers': {'Location': location},
        'body': '',  # no body needed for redirects
    }
