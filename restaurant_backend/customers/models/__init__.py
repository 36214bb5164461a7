from .customer import PHONE_RE, Customer, validate_phone

__all__ = ["Customer", "PHONE_RE", "validate_phone"]
