from sqlalchemy import String, TypeDecorator
import enum
from typing import Type, TypeVar

EnumType = TypeVar('EnumType', bound=enum.Enum)

class EnumValueType(TypeDecorator):
    """Stores an enum by its value in a plain string column."""
    impl = String
    cache_ok = True

    def __init__(self, enum_class: Type[EnumType], *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, self.enum_class):
            return value.value
        return self.enum_class(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None

        for member in self.enum_class:
            if member.value == value:
                return member

        raise ValueError(f"Invalid value '{value}' for enum {self.enum_class.__name__}")
