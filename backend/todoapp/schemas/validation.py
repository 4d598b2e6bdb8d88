from typing import Dict, Type, TypeVar
from pydantic import BaseModel, ValidationError
from todoapp.core.errors import validation_error

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_model(model: Type[ModelT], field_messages: Dict[str, str], **data) -> ModelT:
    """
    Build a pydantic model or raise a VALIDATION AppError.

    Each failing field is reported once, with the friendly message from
    field_messages when one exists and pydantic's own message otherwise.
    """
    try:
        return model(**data)
    except ValidationError as exc:
        fields: Dict[str, str] = {}
        for error in exc.errors():
            loc = error.get("loc") or ("body",)
            field = str(loc[0])
            if field in fields:
                continue
            if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
                # Raised by our own field validators; their text is already user-facing
                fields[field] = str(error["ctx"]["error"])
            else:
                fields[field] = field_messages.get(field, error.get("msg", "Invalid value"))
        raise validation_error(fields) from exc
