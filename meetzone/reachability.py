from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from loguru import logger

from meetzone.exceptions import ValidationError
from meetzone.models import Contour, OwnerId


@dataclass(frozen=True)
class ReachabilitySet:
    """
    Nested contours of a single owner, sorted by value ascending.

    Build it with `from_contours`; the largest contour is the one with the
    highest value, whatever order the provider returned them in.
    """

    contours: Tuple[Contour, ...]

    @classmethod
    def from_contours(cls, contours: Iterable[Contour]) -> "ReachabilitySet":
        contours = list(contours)
        if not contours:
            raise ValidationError("A reachability set needs at least one contour")

        owners = {c.owner_id for c in contours}
        if len(owners) > 1:
            raise ValidationError(
                f"Contours of a reachability set must share one owner, got {sorted(map(str, owners))}"
            )

        ordered = sorted(contours, key=lambda c: c.value)
        if ordered != contours:
            logger.debug(f"Reordered contours of owner {contours[0].owner_id} by value")
        return cls(contours=tuple(ordered))

    @property
    def owner_id(self) -> OwnerId:
        return self.contours[0].owner_id

    @property
    def values(self) -> list[float]:
        return [c.value for c in self.contours]

    def largest(self) -> Contour:
        return self.contours[-1]

    def at(self, value: float) -> Optional[Contour]:
        """Contour with exactly this value, or None."""
        for contour in self.contours:
            if contour.value == value:
                return contour
        return None

    def __iter__(self) -> Iterator[Contour]:
        return iter(self.contours)

    def __len__(self) -> int:
        return len(self.contours)


def group_by_owner(contours: Iterable[Contour]) -> Dict[OwnerId, ReachabilitySet]:
    """
    Split a flat contour list into one ReachabilitySet per owner.

    Owners keep the order in which they first appear.
    """
    grouped: Dict[OwnerId, list] = {}
    for contour in contours:
        grouped.setdefault(contour.owner_id, []).append(contour)

    logger.debug(f"Grouped contours into {len(grouped)} owner(s): {list(grouped)}")
    return {owner: ReachabilitySet.from_contours(cs) for owner, cs in grouped.items()}
