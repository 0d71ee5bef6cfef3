from marshmallow import Schema, fields, validate

OPTIONS_PER_MENU = 3


class MenuOptionSchema(Schema):
    dish_name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    dish_name_ar = fields.Str(allow_none=True, validate=validate.Length(max=200))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    description_ar = fields.Str(allow_none=True, validate=validate.Length(max=500))
    image_path = fields.Str(allow_none=True, validate=validate.Length(max=500))


class UpdateMenuOptionSchema(Schema):
    dish_name = fields.Str(validate=validate.Length(min=1, max=200))
    dish_name_ar = fields.Str(allow_none=True, validate=validate.Length(max=200))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    description_ar = fields.Str(allow_none=True, validate=validate.Length(max=500))
    image_path = fields.Str(allow_none=True, validate=validate.Length(max=500))


class PostMenuSchema(Schema):
    menu_date = fields.Date(required=True, format="%Y-%m-%d")
    options = fields.List(
        fields.Nested(MenuOptionSchema),
        required=True,
        validate=validate.Length(equal=OPTIONS_PER_MENU, error="Exactly 3 menu options are required"),
    )


class VoteSchema(Schema):
    option_id = fields.Int(required=True, strict=True, validate=validate.Range(min=1))


class DecideTieSchema(Schema):
    menu_date = fields.Date(required=True, format="%Y-%m-%d")
    winning_option_id = fields.Int(required=True, strict=True, validate=validate.Range(min=1))


class SuggestionSchema(Schema):
    suggestion_text = fields.Str(required=True, validate=validate.Length(min=2, max=200))


class CloseVotingSchema(Schema):
    # Defaults to tomorrow's cycle when omitted
    menu_date = fields.Date(load_default=None, format="%Y-%m-%d")
