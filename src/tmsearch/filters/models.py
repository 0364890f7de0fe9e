"""Pydantic models for filter state and facet toggles."""

from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

STATUS_KEY = "statusType"
OWNER_KEY = "currentOwner"
ALL_STATUS = "All"


def _is_all(category: Optional[str]) -> bool:
    return category is None or not category.strip() or category.strip().lower() == ALL_STATUS.lower()


class FilterState(BaseModel):
    """Active filter value per column key; None means unfiltered on that column.

    Immutable: every update returns a new FilterState.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    status_type: Optional[str] = Field(default=None, alias=STATUS_KEY, description="Selected status category")
    current_owner: Optional[str] = Field(default=None, alias=OWNER_KEY, description="Owner substring pattern")

    @classmethod
    def from_mapping(cls, filters: Mapping[str, Optional[str]]) -> "FilterState":
        """
        Build from a {column key: value} mapping.

        Raises:
            ValueError: For keys other than statusType and currentOwner
        """
        state = cls(**dict(filters))
        # Route through the update helpers so "All" and "" normalize to unset
        return cls().select_status(state.status_type).with_owner(state.current_owner)

    def as_mapping(self) -> Dict[str, str]:
        """Active filters only, keyed by column key."""
        active = {}
        if self.status_type is not None:
            active[STATUS_KEY] = self.status_type
        if self.current_owner is not None:
            active[OWNER_KEY] = self.current_owner
        return active

    @property
    def is_empty(self) -> bool:
        return not self.as_mapping()

    def select_status(self, category: Optional[str]) -> "FilterState":
        """Set the status category outright; 'All' or blank clears it."""
        value = None if _is_all(category) else category.strip()
        return self.model_copy(update={"status_type": value})

    def toggle_status(self, category: Optional[str]) -> "FilterState":
        """
        Toggle a status category.

        Selecting the already-active category (case-insensitively) clears the
        filter, as does selecting 'All'.
        """
        if _is_all(category):
            return self.select_status(None)
        active = self.status_type
        if active is not None and active.lower() == category.strip().lower():
            return self.select_status(None)
        return self.select_status(category)

    def with_owner(self, pattern: Optional[str]) -> "FilterState":
        """Set the owner substring pattern; an empty pattern clears it."""
        value = pattern if pattern else None
        return self.model_copy(update={"current_owner": value})

    def toggle_owner(self, name: str) -> "FilterState":
        """Owner facet checkbox: set the pattern to name, or clear it if already set."""
        if self.current_owner is not None and self.current_owner == name:
            return self.with_owner(None)
        return self.with_owner(name)


class FacetToggle(BaseModel):
    """One facet control as exposed to the UI."""

    label: str
    active: bool = False
    count: int = 0
