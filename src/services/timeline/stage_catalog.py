"""
Stage catalog and status normalizer.

The catalog is the fixed, ordered list of lifecycle stages an order passes
through. Position 0 is the creation pseudo-stage: it stands for the order
being created, is always completed, and is never a reachable status.

normalize() maps any status string onto a catalog key. Matching is exact
(case and whitespace sensitive) against the catalog keys first, then against
the catalog's legacy alias table; anything else falls back to the first
actionable stage, so legacy or foreign values never raise.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from src.models.enums import OrderType
from src.utils.slug_utils import create_slug


@dataclass(frozen=True)
class Stage:
    """One step of the order lifecycle.

    Attributes:
        key: Canonical status value for this stage
        title: Display title
        description: Display description
        tasks: Checklist labels attached to the stage
        tasks_by_order_type: Replacement checklists for specific order types
    """

    key: str
    title: str
    description: str = ""
    tasks: Tuple[str, ...] = ()
    tasks_by_order_type: Mapping[OrderType, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def slug(self) -> str:
        return create_slug(self.key)

    def tasks_for(self, order_type: OrderType = OrderType.PRODUCTION) -> Tuple[str, ...]:
        """Return the checklist labels that apply to the given order type."""
        return tuple(self.tasks_by_order_type.get(order_type, self.tasks))

    def task_id(self, label: str) -> str:
        """Stable identifier of a checklist item under this stage."""
        return f"{self.slug}-{create_slug(label)}"


class StageCatalog:
    """Immutable ordered collection of stages.

    Args:
        stages: Stages in pipeline order; the first one is the creation
            pseudo-stage and at least one actionable stage must follow it.
        legacy_aliases: Exact-match map of legacy status strings to stage keys.

    Raises:
        ValueError: If the catalog is too short, keys repeat, or an alias
            points at a key that is not an actionable stage.
    """

    def __init__(self, stages: Sequence[Stage], legacy_aliases: Optional[Mapping[str, str]] = None):
        stages = tuple(stages)
        if len(stages) < 2:
            raise ValueError("A stage catalog needs the creation stage and one actionable stage")

        keys = [stage.key for stage in stages]
        if len(set(keys)) != len(keys):
            raise ValueError("Stage keys must be unique")

        self._stages = stages
        self._index_by_key: Dict[str, int] = {
            stage.key: index for index, stage in enumerate(stages) if index > 0
        }

        aliases = dict(legacy_aliases or {})
        unknown = sorted(target for target in aliases.values() if target not in self._index_by_key)
        if unknown:
            raise ValueError(f"Legacy aliases point at unknown stages: {', '.join(unknown)}")
        self._aliases = aliases

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return self._stages

    @property
    def creation_stage(self) -> Stage:
        return self._stages[0]

    @property
    def actionable_stages(self) -> Tuple[Stage, ...]:
        return self._stages[1:]

    @property
    def default_key(self) -> str:
        """Key of the first actionable stage; the target of every unrecognized status."""
        return self._stages[1].key

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self):
        return iter(self._stages)

    def __getitem__(self, index: int) -> Stage:
        return self._stages[index]

    def normalize(self, raw_status) -> str:
        """Map a raw status string onto a canonical stage key.

        Total and pure: never raises, and the same input always yields the
        same key.
        """
        if not isinstance(raw_status, str):
            return self.default_key
        if raw_status in self._index_by_key:
            return raw_status
        return self._aliases.get(raw_status, self.default_key)

    def index_of(self, raw_status) -> int:
        """Catalog position of the stage a raw status normalizes to (always >= 1)."""
        return self._index_by_key[self.normalize(raw_status)]

    def stage_index(self, key: str) -> Optional[int]:
        """Position of a stage by exact key, including the creation stage."""
        for index, stage in enumerate(self._stages):
            if stage.key == key:
                return index
        return None

    def get(self, key: str) -> Optional[Stage]:
        index = self.stage_index(key)
        return None if index is None else self._stages[index]

    def task_ids(self, order_type: OrderType = OrderType.PRODUCTION) -> List[str]:
        """Every checklist item id in catalog order."""
        return [
            stage.task_id(label) for stage in self._stages for label in stage.tasks_for(order_type)
        ]


# =============================================================================
# Default catalog
# =============================================================================

STAGE_CREATED = "Zamówienie utworzone"
STAGE_VERIFICATION = "Weryfikacja i płatność"
STAGE_FULFILLMENT = "Kompletacja zamówienia"
STAGE_HANDOVER = "Wydanie przewoźnikowi"
STAGE_DELIVERED = "Dostarczone do klienta"

DEFAULT_STAGES = (
    Stage(
        key=STAGE_CREATED,
        title="Zamówienie utworzone",
        description="Zamówienie zostało dodane ręcznie w panelu administratora.",
    ),
    Stage(
        key=STAGE_VERIFICATION,
        title="Weryfikacja i płatność",
        description="Zespół weryfikuje płatność oraz kompletność danych klienta.",
        tasks=("Proforma wystawiona i wysłana", "Proforma opłacona"),
        # Samples are paid online, no proforma is issued
        tasks_by_order_type={OrderType.SAMPLE: ("Płatność Tpay potwierdzona",)},
    ),
    Stage(
        key=STAGE_FULFILLMENT,
        title="Kompletacja zamówienia",
        description="Magazyn przygotowuje zamówienie do wysyłki.",
        tasks=("Zamówienie przyjęte przez magazyn", "Wysłane zamówienie"),
    ),
    Stage(
        key=STAGE_HANDOVER,
        title="Wydanie przewoźnikowi",
        description="Zamówienie przekazano do przewoźnika wraz z numerem śledzenia.",
    ),
    Stage(
        key=STAGE_DELIVERED,
        title="Dostarczone do klienta",
        description="Klient potwierdził odebranie przesyłki.",
        tasks=("Wystawiono fakturę końcową", "Opłacono fakturę kosztową"),
    ),
)

LEGACY_STATUS_ALIASES = {
    # Older manual statuses
    "Nowe": STAGE_VERIFICATION,
    "W realizacji": STAGE_FULFILLMENT,
    "Pakowanie": STAGE_FULFILLMENT,
    "Wysłane": STAGE_HANDOVER,
    "Dostarczone": STAGE_DELIVERED,
    "Zakończone": STAGE_DELIVERED,
    # Kanban pipeline identifiers
    "order.received": STAGE_VERIFICATION,
    "order.pending_proforma": STAGE_VERIFICATION,
    "order.proforma_issued": STAGE_VERIFICATION,
    "order.paid": STAGE_FULFILLMENT,
    "order.forwarded_to_supplier": STAGE_FULFILLMENT,
    "order.fulfillment_confirmed": STAGE_HANDOVER,
    "order.final_invoice": STAGE_DELIVERED,
    "order.closed": STAGE_DELIVERED,
}

DEFAULT_CATALOG = StageCatalog(DEFAULT_STAGES, LEGACY_STATUS_ALIASES)


def normalize_status(raw_status, catalog: StageCatalog = DEFAULT_CATALOG) -> str:
    """Normalize a raw status against a catalog (default catalog when omitted)."""
    return catalog.normalize(raw_status)
