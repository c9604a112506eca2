from marshmallow import Schema, fields, validate

from storefront.domain.order import OrderStatus

PHONE = validate.Regexp(r"^\+?[0-9][0-9 \-]{6,14}$", error="Invalid phone number.")


class AddCartItemSchema(Schema):
    product_id = fields.Int(required=True, strict=True)
    quantity = fields.Int(load_default=1, strict=True, validate=validate.Range(min=1, max=10))
    size = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=20))
    color = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=30))


class UpdateCartItemSchema(Schema):
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=0, max=10))


class CheckoutSchema(Schema):
    # address_id and payment_method are checked by AddressPaymentSelector so the
    # caller gets one field-level error report for the whole selection.
    address_id = fields.Int(load_default=None, allow_none=True, strict=True)
    payment_method = fields.Str(load_default=None, allow_none=True)
    idempotency_key = fields.Str(load_default=None, allow_none=True, validate=validate.Length(min=1, max=128))


class WishlistToggleSchema(Schema):
    product_id = fields.Int(required=True, strict=True)


class AddressSchema(Schema):
    full_name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    phone = fields.Str(required=True, validate=PHONE)
    address_line_1 = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    address_line_2 = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=200))
    city = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    state = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    postal_code = fields.Str(required=True, validate=validate.Regexp(r"^[0-9A-Za-z \-]{3,10}$"))
    is_default = fields.Bool(load_default=False)


class ShopSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=2, max=100))
    description = fields.Str(load_default=None, allow_none=True)
    phone = fields.Str(load_default=None, allow_none=True, validate=PHONE)
    email = fields.Email(load_default=None, allow_none=True)
    address_line_1 = fields.Str(load_default=None, allow_none=True)
    address_line_2 = fields.Str(load_default=None, allow_none=True)
    city = fields.Str(load_default=None, allow_none=True)
    state = fields.Str(load_default=None, allow_none=True)
    postal_code = fields.Str(load_default=None, allow_none=True)
    business_type = fields.Str(load_default=None, allow_none=True)
    latitude = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-90, max=90))
    longitude = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=-180, max=180))


class ProductSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=2, max=200))
    description = fields.Str(allow_none=True)
    price_paise = fields.Int(required=True, strict=True, validate=validate.Range(min=0))
    original_price_paise = fields.Int(allow_none=True, strict=True, validate=validate.Range(min=0))
    stock_quantity = fields.Int(strict=True, validate=validate.Range(min=0))
    sizes = fields.List(fields.Str(validate=validate.Length(min=1, max=20)))
    colors = fields.List(fields.Str(validate=validate.Length(min=1, max=30)))
    image_url = fields.Url(allow_none=True)
    category_id = fields.Int(allow_none=True, strict=True)
    brand_id = fields.Int(allow_none=True, strict=True)
    is_active = fields.Bool()


class OrderStatusSchema(Schema):
    status = fields.Str(required=True, validate=validate.OneOf([s.value for s in OrderStatus]))


class ProductFlagsSchema(Schema):
    is_active = fields.Bool()
    is_featured = fields.Bool()
