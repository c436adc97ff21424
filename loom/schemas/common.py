from pydantic import BaseModel, ConfigDict, field_validator


class WriteSchema(BaseModel):
    """
    Base for create payloads.

    Enum fields are stored as their plain string values and unknown
    fields are rejected.
    """

    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
        extra="forbid",
    )


class PartialUpdate(BaseModel):
    """
    Base for sparse updates.

    Only fields the caller actually set are applied; an empty update is
    valid and only refreshes updated_at.
    """

    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


def reject_null(*fields: str):
    """Validator refusing an explicit null for fields that are required on the row."""

    def _reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    return field_validator(*fields)(classmethod(_reject_null))
