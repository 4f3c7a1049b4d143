from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import (
    DeviceUnavailableError,
    DomainError,
    PolicyRejectionError,
    PreconditionError,
    WorkflowStateError,
)

logger = logging.getLogger(__name__)


def fail(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def json_errors(view):
    """Turn domain errors raised by services into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except PolicyRejectionError as e:
            return fail(str(e), 422, verdict=e.verdict.kind.value)
        except (PreconditionError, WorkflowStateError, DeviceUnavailableError) as e:
            return fail(str(e), 409)
        except DomainError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("unhandled error in %s", view.__name__)
            return fail("Terjadi kesalahan sistem", 500)

    return wrapper
