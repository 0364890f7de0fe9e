from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class DisplayRecord(BaseModel):
    """One normalized search hit, ready for filtering and rendering.

    Every field is always present. Timestamps are integer epoch seconds and
    stay undecoded until render time; description keeps its full text.
    Serializes with camelCase keys (statusType, classCodes, ...) when dumped
    with by_alias=True.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: Tuple[str, ...] = ()
    class_codes: Tuple[str, ...] = Field(default=(), alias="classCodes")
    status_type: str = Field(default="", alias="statusType")
    status_date: int = Field(default=0, alias="statusDate")
    renewal_date: int = Field(default=0, alias="renewalDate")
    registration_date: int = Field(default=0, alias="registrationDate")
    registration_number: str = Field(default="", alias="registrationNumber")
    current_owner: str = Field(default="", alias="currentOwner")

    @property
    def description_text(self) -> str:
        """Full description fragments joined with single spaces."""
        return " ".join(self.description)
