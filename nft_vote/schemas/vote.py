from marshmallow import EXCLUDE, ValidationError, fields, validate

from ..extensions import ma


class OptionIdField(fields.Field):
    """Option ids are strings, but clients often send them as numbers."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValidationError("Not a valid option id.")
        return str(value)


class EligibilityCheckSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    # Defaults to the caller's own id
    user_id = fields.Str(required=False, allow_none=True, data_key="userId")


class CastVoteSchema(ma.Schema):
    error_message = "optionId is required"

    class Meta:
        unknown = EXCLUDE

    option_id = OptionIdField(required=True, data_key="optionId", validate=validate.Length(min=1, max=40))
    user_id = fields.Str(required=False, allow_none=True, data_key="userId")
