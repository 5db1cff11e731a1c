from marshmallow import Schema, fields, validate, EXCLUDE


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Usernames are case-sensitive: no normalisation
    username = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))
