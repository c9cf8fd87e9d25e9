"""Exceptions raised below the API layer."""


class RecordNotFoundError(LookupError):
    """A requested row does not exist."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"{table} record not found: {key}")


class FormValidationError(ValueError):
    """Submitted data failed validation before reaching the database."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class RecordInUseError(ValueError):
    """A row cannot be deleted while other rows still reference it."""

    def __init__(self, table: str, key: str, usage: dict):
        self.table = table
        self.key = key
        self.usage = usage
        super().__init__(f"{table} record {key} is still in use")
