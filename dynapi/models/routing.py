"""
Routing table models.

The route binder turns a ``ContractDescriptor`` into a ``RoutingTable``:
one ``RouteEntry`` per verb/path pair, each carrying its bound handler and
the effective metadata and policies resolved for the operation.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Optional, Tuple

from dynapi.models.contract import HttpLogging, HttpVerb, RequestTimeout

if TYPE_CHECKING:
    from dynapi.core.binder import BoundHandler


@dataclass(frozen=True)
class EffectiveMetadata:
    """Metadata of one operation after merging it with its contract group"""
    description: Optional[str] = None
    group_name: Optional[str] = None
    summary: Optional[str] = None
    order: Optional[int] = None
    logging: Optional[HttpLogging] = None
    timeout: Optional[RequestTimeout] = None
    tags: Tuple[str, ...] = ()
    items: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class RouteEntry:
    """A bound route: (verb, path) -> handler, effective metadata and policies"""
    verb: HttpVerb
    path: str
    handler: "BoundHandler"
    metadata: EffectiveMetadata
    policies: Tuple[str, ...]
    contract: str
    operation: str

    @property
    def requires_authorization(self) -> bool:
        return bool(self.policies)


@dataclass(frozen=True)
class RoutingTable:
    """Immutable, ordered collection of the routes of one contract"""
    contract: str
    entries: Tuple[RouteEntry, ...] = ()

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, verb: str, path: str) -> Tuple[RouteEntry, ...]:
        """All entries registered under the verb/path pair"""
        verb = verb.upper()
        return tuple(e for e in self.entries if e.verb.value == verb and e.path == path)

    def for_operation(self, operation: str) -> Tuple[RouteEntry, ...]:
        return tuple(e for e in self.entries if e.operation == operation)
