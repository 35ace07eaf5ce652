from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from backoffice.errors import BackofficeError


@dataclass(frozen=True)
class ServiceResult:
    """Outcome of an orchestrated operation: payload on success, typed error otherwise."""

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[BackofficeError] = None
    value: Any = None

    @classmethod
    def ok(cls, data: Dict[str, Any], value: Any = None) -> "ServiceResult":
        return cls(success=True, data=dict(data), value=value)

    @classmethod
    def failed(cls, error: BackofficeError) -> "ServiceResult":
        return cls(success=False, error=error)

    @property
    def status_code(self) -> int:
        return 200 if self.success else int(self.error.status_code if self.error else 500)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {**self.data, "success": True}
        if self.error is None:
            return {"success": False, "error": "Unknown error"}
        return self.error.to_dict()
