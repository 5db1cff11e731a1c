from marshmallow import Schema, fields


class UploadResultSchema(Schema):
    success = fields.Boolean(dump_default=True)
    filename = fields.String(required=True)
    size = fields.Integer()
