"""Customer identities for synthetic demo orders."""
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from app.services.tour_data_loader import TourAggregate


class IdentityKind(str, Enum):
    """Where an order's customer identity comes from."""
    PARTICIPANT = "participant"
    GENERATED = "generated"
    HOST = "host"


@dataclass(frozen=True)
class CustomerIdentity:
    """Named customer placed on a synthetic order."""
    first_name: str
    last_name: str
    email: str
    company: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class NameSampler(Protocol):
    """Supplies generated (first, last) name pairs."""

    def sample(self, count: int) -> List[Tuple[str, str]]:
        ...


CELEBRITY_NAMES: Tuple[Tuple[str, str], ...] = (
    ("Taylor", "Swift"),
    ("Keanu", "Reeves"),
    ("Oprah", "Winfrey"),
    ("Tom", "Hanks"),
    ("Serena", "Williams"),
    ("Dwayne", "Johnson"),
    ("Beyonce", "Knowles"),
    ("Lionel", "Messi"),
    ("Meryl", "Streep"),
    ("Denzel", "Washington"),
    ("Adele", "Adkins"),
    ("Morgan", "Freeman"),
    ("Emma", "Watson"),
    ("Ryan", "Reynolds"),
    ("Lady", "Gaga"),
    ("Leonardo", "DiCaprio"),
    ("Zendaya", "Coleman"),
    ("Pedro", "Pascal"),
    ("Dolly", "Parton"),
    ("Samuel", "L Jackson"),
)


class CelebrityNameSampler:
    """
    Samples celebrity names without replacement.

    Requests larger than the name list return every name once; callers fall
    back to generic demo identities for the remaining slots.
    """

    def __init__(self, rng: Optional[random.Random] = None, names: Sequence[Tuple[str, str]] = CELEBRITY_NAMES):
        self.rng = rng or random.Random()
        self.names = tuple(names)

    def sample(self, count: int) -> List[Tuple[str, str]]:
        if count <= 0:
            return []
        return self.rng.sample(list(self.names), min(count, len(self.names)))


class IdentitySource:
    """
    Resolves the customer identity for one order slot.

    Pure: the same tour and the same generated names always yield the same
    identities.
    """

    def __init__(self, tour: TourAggregate, generated_names: Sequence[Tuple[str, str]] = ()):
        """
        Args:
            tour: Loaded tour aggregate
            generated_names: Names drawn from a NameSampler, indexed by slot
        """
        self.tour = tour
        self.generated_names = tuple(generated_names)

    def resolve(self, kind: IdentityKind, index: int) -> CustomerIdentity:
        """
        Resolve the identity for slot ``index``.

        Args:
            kind: Identity source
            index: Zero-based slot index

        Returns:
            CustomerIdentity

        Raises:
            IndexError: If a participant slot is out of range
            ValueError: If kind is unknown
        """
        kind = IdentityKind(kind)
        if kind is IdentityKind.PARTICIPANT:
            return self._participant(index)
        if kind is IdentityKind.GENERATED:
            return self._generated(index)
        return self._host(index)

    def _participant(self, index: int) -> CustomerIdentity:
        participant = self.tour.participants[index]
        return CustomerIdentity(
            first_name=participant.first_name or "Participant",
            last_name=participant.last_name or f"{index + 1}",
            email=participant.email or f"participant{index + 1}@demo.com",
            company=participant.company or "",
        )

    def _generated(self, index: int) -> CustomerIdentity:
        if index < len(self.generated_names):
            first, last = self.generated_names[index]
        else:
            first, last = "Demo", f"Customer {index + 1}"
        email = f"{first.lower()}.{''.join(last.lower().split())}@demo.com"
        return CustomerIdentity(first_name=first, last_name=last, email=email)

    def _host(self, index: int) -> CustomerIdentity:
        host = self.tour.host
        return CustomerIdentity(
            first_name=host.first_name or "Host",
            last_name=host.last_name or host.display_name or "Demo",
            email=f"host.demo{index + 1}@example.com",
        )
