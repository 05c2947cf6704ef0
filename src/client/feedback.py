"""Turn action results into what the seller sees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from client.errors import AuthRedirect, ValidationFailed
from shared.domain.result import Ok, Result

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notice:
    title: str
    description: str = ""
    variant: str = DEFAULT


@dataclass(frozen=True)
class Redirect:
    url: str


def render(
    result: Result, success: str = "Saved", success_description: str = ""
) -> Union[Notice, Redirect]:
    """Map a result to a success notice, a login redirect or an error notice."""
    if isinstance(result, Ok):
        return Notice(success, success_description)
    error = result.error
    if isinstance(error, AuthRedirect):
        return Redirect(error.login_url)
    if isinstance(error, ValidationFailed):
        return Notice(error.title, error.description, DESTRUCTIVE)
    return Notice("Error", str(error), DESTRUCTIVE)
