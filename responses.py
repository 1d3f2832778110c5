"""Uniform result envelope shared by every service operation.

Services never hand raw exceptions to the HTTP layer. They return a
``ServiceResponse`` whose ``body`` has the shape
``{success, data?, message?, error?, details?}`` and whose ``status_code`` is
derived from an ``ErrorKind``; routes only need ``jsonify(result.body)``.
"""
from collections import namedtuple
from enum import Enum


ServiceResponse = namedtuple('ServiceResponse', ['status_code', 'body'])


class ErrorKind(Enum):
    VALIDATION_FAILED = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_ERROR = 500

    @property
    def status_code(self):
        return self.value


def success_response(data=None, message=None, status_code=200):
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return ServiceResponse(status_code, body)


def error_response(error, kind=ErrorKind.VALIDATION_FAILED, details=None):
    body = {'success': False, 'error': error}
    if details:
        body['details'] = details
    return ServiceResponse(kind.status_code, body)


def not_found_response(message='Resource not found'):
    return error_response(message, ErrorKind.NOT_FOUND)


def unauthorized_response(message='Unauthorized access', details=None):
    return error_response(message, ErrorKind.UNAUTHORIZED, details)


def forbidden_response(message='Access denied', details=None):
    return error_response(message, ErrorKind.FORBIDDEN, details)


def conflict_response(message):
    return error_response(message, ErrorKind.CONFLICT)


def internal_error_response(message='Internal server error'):
    return error_response(message, ErrorKind.INTERNAL_ERROR)
