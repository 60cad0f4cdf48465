from marshmallow import EXCLUDE, fields, validate

from ..extensions import ma


class SendCodeSchema(ma.Schema):
    error_message = "A valid email address is required"

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)


class VerifyCodeSchema(ma.Schema):
    error_message = "Email and verification code are required"

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    code = fields.Str(required=True, validate=validate.Length(min=1, max=16))


class WalletConnectSchema(ma.Schema):
    error_message = "walletType is required"

    class Meta:
        unknown = EXCLUDE

    wallet_type = fields.Str(required=True, data_key="walletType", validate=validate.Length(min=1, max=40))
    wallet_address = fields.Str(
        required=False, allow_none=True, data_key="walletAddress", validate=validate.Length(min=1, max=128)
    )
    # Accepted but not verified
    signature = fields.Str(required=False, allow_none=True)
