"""Per-project settings, resolved once when the engine is built."""

from __future__ import annotations

from dataclasses import dataclass

from shipready_core.errors import UnknownProjectError
from shipready_core.tickets import TicketExtractor


@dataclass(frozen=True)
class ProjectProfile:
    name: str
    ticket_prefix: str

    def extractor(self) -> TicketExtractor:
        return TicketExtractor(self.ticket_prefix)


BUILTIN_PROFILES: dict[str, ProjectProfile] = {
    "foo-web": ProjectProfile(name="foo-web", ticket_prefix="FOO"),
    "bar-web": ProjectProfile(name="bar-web", ticket_prefix="BAR"),
}


def get_profile(project: str, extra: dict[str, str] | None = None) -> ProjectProfile:
    """Look up a project profile.

    ``extra`` maps project names to ticket prefixes (the ``projects`` key of
    .shipready.yml) and takes precedence over the built-ins.
    """
    profiles = dict(BUILTIN_PROFILES)
    for name, prefix in (extra or {}).items():
        profiles[name] = ProjectProfile(name=name, ticket_prefix=str(prefix))

    try:
        return profiles[project]
    except KeyError:
        raise UnknownProjectError(project, list(profiles))
