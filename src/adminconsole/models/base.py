from typing import ClassVar, List, Tuple

from pydantic import BaseModel, ConfigDict


class ConsoleModel(BaseModel):
    """Base for entities and drafts edited through console forms.

    Assignment is validated so enumerated fields can never hold a value the
    service does not accept.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    required_fields: ClassVar[Tuple[str, ...]] = ()

    def missing_fields(self) -> List[str]:
        """Return the required fields that are blank."""
        missing = []
        for name in self.required_fields:
            value = getattr(self, name, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing
