"""Owners of results: individual competitors and relay teams."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Competitor:
    """An individual runner."""

    name: str
    club: str = ""


@dataclass
class Team:
    """A relay team.  ``members`` holds one :class:`Competitor` per leg."""

    name: str
    club: str = ""
    members: list[Competitor] = field(default_factory=list)

    def set_members(self, members: list[Competitor]) -> None:
        self.members = list(members)
