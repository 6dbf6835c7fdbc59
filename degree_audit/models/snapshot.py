"""
Explainability snapshot models.

A BasketSnapshot is a plain, serializable copy of a basket subtree's
accumulated state, taken after evaluation for display or JSON output.
"""

from dataclasses import asdict, dataclass, field


@dataclass
class BasketSnapshot:
    """
    Printable copy of one basket and (some of) its children.

    Attributes:
        name: Basket title, empty for anonymous baskets
        kind: Basket variant (e.g., "module", "array")
        label: Short description used when there is no title
            (e.g., "CS2103T", "at least 2 of")
        satisfied: Accumulated satisfaction
        matched_credits: Accumulated matched credits
        matched_module_codes: Sorted codes of accumulated matched courses
        children: Snapshots of the children that fit in the depth budget
    """
    name: str
    kind: str
    label: str
    satisfied: bool
    matched_credits: float
    matched_module_codes: list
    children: list = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.label

    def to_dict(self) -> dict:
        return asdict(self)
