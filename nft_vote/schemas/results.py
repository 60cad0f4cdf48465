from marshmallow import fields

from ..extensions import ma


class OptionResultSchema(ma.Schema):
    id = fields.Str(required=True)
    title = fields.Str(required=True)
    description = fields.Str()
    votes = fields.Int(required=True)


class OptionStatsSchema(OptionResultSchema):
    percentage = fields.Int(required=True)


class AdminStatsSchema(ma.Schema):
    timestamp = fields.Str(required=True)
    total_users = fields.Int(required=True, data_key="totalUsers")
    users_by_auth_method = fields.Dict(keys=fields.Str(), values=fields.Int(), data_key="usersByAuthMethod")
    total_votes = fields.Int(required=True, data_key="totalVotes")
    recorded_votes = fields.Int(required=True, data_key="recordedVotes")
    voting_options = fields.List(fields.Nested(OptionStatsSchema), data_key="votingOptions")
