from __future__ import annotations


class WinnowError(Exception):
    """Base class for failures reported back to API and CLI callers."""

    status_code = 400

    def payload(self) -> dict:
        return {"success": False, "error": str(self)}


class NotFoundError(WinnowError, LookupError):
    status_code = 404

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class PermissionDeniedError(WinnowError):
    status_code = 403


class InvalidChecklistError(WinnowError):
    pass


class InvalidStatusError(WinnowError):
    pass


class DuplicateApplicationError(WinnowError):
    status_code = 409


class IncompleteChecklistError(WinnowError):
    status_code = 422

    def __init__(self, missing_item_ids: list[str]):
        super().__init__(
            "every checklist item must be checked and commented; incomplete: "
            + ", ".join(missing_item_ids)
        )
        self.missing_item_ids = list(missing_item_ids)

    def payload(self) -> dict:
        return {**super().payload(), "missingItems": self.missing_item_ids}


class GenerationError(WinnowError):
    status_code = 502


class AuthenticationError(WinnowError):
    status_code = 401
