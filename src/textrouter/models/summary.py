"""Run summary accumulated across one ingestion run."""

from __future__ import annotations

from pydantic import BaseModel, Field

from textrouter.core.exceptions import SinkError
from textrouter.models.record import Record


class FieldErrorDetail(BaseModel):
    field: str
    kind: str
    detail: str


class DecodeErrorDetail(BaseModel):
    """A line that was not dispatched because some fields failed."""

    line_number: int
    fields: list[FieldErrorDetail] = Field(default_factory=list)


class DeliveryErrorDetail(BaseModel):
    """One failed delivery of one record to one sink."""

    line_number: int
    sink: str
    kind: str
    message: str


class RunSummary(BaseModel):
    """Counters and capped failure details for one run."""

    schema_name: str = ""
    lines_read: int = 0
    decoded: int = 0
    decode_failures: int = 0
    delivered: dict[str, int] = Field(default_factory=dict)
    delivery_failures: dict[str, int] = Field(default_factory=dict)
    decode_errors: list[DecodeErrorDetail] = Field(default_factory=list)
    delivery_errors: list[DeliveryErrorDetail] = Field(default_factory=list)
    details_truncated: bool = False
    max_details: int = Field(default=1000, exclude=True)

    def record_decoded(self) -> None:
        self.decoded += 1

    def record_decode_failure(self, record: Record) -> None:
        self.decode_failures += 1
        if len(self.decode_errors) >= self.max_details:
            self.details_truncated = True
            return
        self.decode_errors.append(DecodeErrorDetail(
            line_number=record.line_number,
            fields=[
                FieldErrorDetail(field=f.field, kind=str(f.kind), detail=f.detail)
                for f in record.failures
            ],
        ))

    def record_delivery(self, sink: str) -> None:
        self.delivered[sink] = self.delivered.get(sink, 0) + 1
        self.delivery_failures.setdefault(sink, 0)

    def record_delivery_failure(self, line_number: int, sink: str, error: SinkError) -> None:
        self.delivery_failures[sink] = self.delivery_failures.get(sink, 0) + 1
        self.delivered.setdefault(sink, 0)
        if len(self.delivery_errors) >= self.max_details:
            self.details_truncated = True
            return
        self.delivery_errors.append(DeliveryErrorDetail(
            line_number=line_number, sink=sink, kind=str(error.kind), message=error.message,
        ))

    @property
    def total_delivered(self) -> int:
        return sum(self.delivered.values())

    @property
    def total_delivery_failures(self) -> int:
        return sum(self.delivery_failures.values())

    def render(self) -> str:
        """Human-readable report printed at the end of a run."""
        out = [
            f"schema:          {self.schema_name}",
            f"lines read:      {self.lines_read}",
            f"decoded:         {self.decoded}",
            f"decode failures: {self.decode_failures}",
        ]
        for sink in sorted(set(self.delivered) | set(self.delivery_failures)):
            out.append(
                f"{sink + ':':<17}{self.delivered.get(sink, 0)} delivered, "
                f"{self.delivery_failures.get(sink, 0)} failed"
            )
        for d in self.decode_errors:
            reasons = "; ".join(f"{f.field} {f.kind} ({f.detail})" for f in d.fields)
            out.append(f"  line {d.line_number}: {reasons}")
        for e in self.delivery_errors:
            out.append(f"  line {e.line_number}: {e.sink} {e.kind}: {e.message}")
        if self.details_truncated:
            out.append(f"  (details truncated after {self.max_details} entries)")
        return "\n".join(out)
