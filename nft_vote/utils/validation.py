from flask import abort
from marshmallow import ValidationError


def validate_or_abort(schema, payload):
    """Load ``payload`` through ``schema`` or abort with a 400 listing the field errors."""
    try:
        return schema.load(payload)
    except ValidationError as err:
        abort(
            400,
            description={
                "code": "VALIDATION_ERROR",
                "message": getattr(schema, "error_message", "Validation error"),
                "errors": err.messages,
            },
        )
