from logging import getLogger
from typing import Iterable

from tdswinners.utils.identity import ValidatorIdentity

logger = getLogger(__name__)


class ExclusionPolicy:
    """Identities that may be compared against but never win a category."""

    def __init__(self, identities: Iterable[ValidatorIdentity]):
        self._excluded = frozenset(identities)

    @classmethod
    def from_reference_validators(
        cls,
        baseline: ValidatorIdentity,
        bootstrap_leader: ValidatorIdentity,
    ) -> "ExclusionPolicy":
        policy = cls((baseline, bootstrap_leader))
        logger.info("[exclusion] Excluding %d identities from rankings", len(policy))
        return policy

    def is_excluded(self, identity: ValidatorIdentity) -> bool:
        return identity in self._excluded

    def __len__(self) -> int:
        return len(self._excluded)

    def candidates(
        self, identities: Iterable[ValidatorIdentity]
    ) -> list[ValidatorIdentity]:
        return sorted({i for i in identities if i not in self._excluded})
