import json
import logging
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.http import Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .auth import get_caller
from .exceptions import BookingError

logger = logging.getLogger(__name__)


class BadRequestBody(Exception):
    pass


def error_response(message, status, details=None):
    body = {"error": message}
    if details:
        body["details"] = details
    return JsonResponse(body, status=status)


def read_json(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (TypeError, ValueError):
        raise BadRequestBody("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise BadRequestBody("Request body must be a JSON object")
    return payload


def validation_messages(exc):
    if hasattr(exc, "message_dict"):
        return [msg for messages in exc.message_dict.values() for msg in messages]
    return list(exc.messages)


def json_api(view):
    """
    Resolve the caller, run the view and turn the booking error taxonomy
    into JSON error responses.

    Wrapped views are CSRF exempt; JSON clients carry no token.
    """
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        request.caller = get_caller(request)
        try:
            return view(request, *args, **kwargs)
        except BadRequestBody as e:
            return error_response(str(e), 400)
        except ValidationError as e:
            messages = validation_messages(e)
            return error_response(messages[0] if len(messages) == 1 else "Validation failed", 400, messages)
        except BookingError as e:
            return error_response(e.message, e.status_code, e.details)
        except PermissionDenied as e:
            return error_response(str(e) or "Access denied", 403)
        except (ObjectDoesNotExist, Http404):
            return error_response("Appointment not found", 404)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return error_response("Internal server error", 500)
    return csrf_exempt(wrapper)


def staff_required(view):
    """Must be stacked under json_api so request.caller is set."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        caller = request.caller
        if caller is None or not caller.is_admin:
            return error_response("Access denied. Admin privileges required.", 403)
        return view(request, *args, **kwargs)
    return wrapper
