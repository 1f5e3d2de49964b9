"""
Player identity extraction from a rendered chess.com game page.

The live board shows two player blocks:

    <div id="board-layout-player-top">      ← opponent
      <a class="user-username-link">Magnus</a>
      <span class="user-tagline-rating">(2850)</span>
    </div>
    <div id="board-layout-player-bottom">   ← self

The username gives us the account to look up; the rating in the tagline is
the live rating for the time control being played (category rating).
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from chessrisk.errors import MissingIdentityError

SELF = "self"
OPPONENT = "opponent"

# Board orientation: we always sit at the bottom
SIDE_CONTAINERS = {
    SELF: "board-layout-player-bottom",
    OPPONENT: "board-layout-player-top",
}

_RATING_RE = re.compile(r"-?\d+")


@dataclass(frozen=True)
class PlayerIdentity:
    """Who is sitting on one side of the board, as read from the page."""

    username: str  # lower-cased
    category_rating: Optional[int] = None
    side: Optional[str] = None

    def __repr__(self) -> str:
        return f"<PlayerIdentity({self.side}: {self.username}, {self.category_rating})>"


def _as_soup(page: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(page, BeautifulSoup):
        return page
    return BeautifulSoup(page, "lxml")


def parse_rating(text: str) -> Optional[int]:
    """
    Parse a tagline rating such as "(1523)".

    Returns None for provisional/unrated taglines that hold no number.
    """
    cleaned = text.replace("(", "").replace(")", "").strip()
    match = _RATING_RE.search(cleaned)
    if not match:
        return None
    return int(match.group())


def resolve_side(page: Union[str, BeautifulSoup], side: str) -> PlayerIdentity:
    """
    Read one player's username and live rating from the page.

    Args:
        page: Page HTML or an already parsed soup
        side: "self" (bottom of the board) or "opponent" (top)

    Returns:
        PlayerIdentity. category_rating is None if the tagline has no number.

    Raises:
        MissingIdentityError: If the player block or username link is missing
        ValueError: If side is not "self" or "opponent"
    """
    if side not in SIDE_CONTAINERS:
        raise ValueError(f"side must be 'self' or 'opponent', got '{side}'")

    soup = _as_soup(page)
    container: Optional[Tag] = soup.find(id=SIDE_CONTAINERS[side])
    if container is None:
        raise MissingIdentityError("Player block not found on page", side=side)

    link = container.select_one("a.user-username-link")
    username = link.get_text(strip=True).lower() if link else ""
    if not username:
        raise MissingIdentityError("Username link not found in player block", side=side)

    rating_elem = container.select_one("span.user-tagline-rating")
    rating = parse_rating(rating_elem.get_text(strip=True)) if rating_elem else None

    return PlayerIdentity(username=username, category_rating=rating, side=side)


def resolve_players(page: Union[str, BeautifulSoup]) -> tuple[PlayerIdentity, PlayerIdentity]:
    """Resolve (self, opponent) identities from one page."""
    soup = _as_soup(page)
    return resolve_side(soup, SELF), resolve_side(soup, OPPONENT)
