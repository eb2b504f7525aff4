"""Envelope models shared by every Reddit response."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RedditModel(BaseModel):
    """Base for payload models. Unknown fields are kept so schema additions never break parsing."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Thing(BaseModel, Generic[T]):
    """
    Reddit's uniform ``{kind, data}`` wrapper.

    ``kind`` is the type prefix (``t1`` comment, ``t3`` link, ``t5``
    subreddit, ``Listing``, ...).
    """

    kind: str
    data: T


class Listing(BaseModel, Generic[T]):
    """One page of results plus the anchors needed to request its neighbours."""

    after: Optional[str] = None
    before: Optional[str] = None
    dist: Optional[int] = None
    modhash: Optional[str] = None
    children: List[Thing[T]] = Field(default_factory=list)

    def unwrap(self) -> List[T]:
        """Return the children with their envelopes removed, in server order."""
        return [child.data for child in self.children]
