from typing import Dict, List
from pydantic import BaseModel, ConfigDict, model_validator

from .entities import check_field
from .enums import EntityType


class ReferenceField(BaseModel):
    """A foreign-key field: ``entity_type.field`` must name an existing ``target_type`` id."""
    entity_type: EntityType
    field: str
    target_type: EntityType

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_field(self) -> "ReferenceField":
        check_field(self.entity_type, self.field)
        return self

    def __str__(self) -> str:
        return f"{self.entity_type.value}.{self.field} -> {self.target_type.value}"


class OrphanReport(BaseModel):
    entity_type: EntityType
    entity_id: str
    dangling_field: str
    dangling_value: str

    model_config = ConfigDict(frozen=True)


class AuditSummary(BaseModel):
    total: int
    by_entity_type: Dict[str, int]
    orphans: List[OrphanReport]

    @classmethod
    def from_reports(cls, reports: List[OrphanReport]) -> "AuditSummary":
        counts: Dict[str, int] = {}
        for report in reports:
            counts[report.entity_type.value] = counts.get(report.entity_type.value, 0) + 1
        return cls(total=len(reports), by_entity_type=counts, orphans=reports)
