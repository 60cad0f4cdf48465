from marshmallow import fields

from ..extensions import ma


class UserSchema(ma.Schema):
    id = fields.Str()
    email = fields.Email(allow_none=True)
    wallet_address = fields.Str(allow_none=True, data_key="walletAddress")
    auth_method = fields.Str(data_key="authMethod")
    role = fields.Str()
