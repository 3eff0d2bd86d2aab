"""
Report field registry and row builder.

Every exportable column is described once in ``FIELDS``: its header, the
column width used by the spreadsheet renderer, and a getter that derives the
cell value from a ``ReportEntry``. Renderers never look at actions directly,
they only consume the columns and rows built here.
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from django.utils import timezone

NO_PROJECT = 'No project'
NO_TASK = 'No task'

DEFAULT_FIELDS = ('date', 'project', 'task', 'description', 'duration')


@dataclass
class ReportEntry:
    """One completed action flattened for export."""
    start: object
    end: Optional[object]
    note: str = ''
    project_name: Optional[str] = None
    task_name: Optional[str] = None
    is_billable: bool = False
    hourly_rate: Decimal = Decimal('0')

    @classmethod
    def from_action(cls, action):
        task = action.task
        project = task.project if task is not None else None
        return cls(
            start=action.user_start_time,
            end=action.user_end_time,
            note=action.note or '',
            project_name=project.name if project is not None else None,
            task_name=task.name if task is not None else None,
            is_billable=bool(project is not None and project.is_billable),
            hourly_rate=project.hourly_rate if project is not None else Decimal('0'),
        )


@dataclass
class RenderContext:
    user_tz: object
    use_24_hour: bool
    now: object

    def local(self, value):
        return value.astimezone(self.user_tz)

    def end_of(self, entry):
        return entry.end if entry.end is not None else self.now


@dataclass(frozen=True)
class ReportField:
    id: str
    header: str
    width: int
    getter: Callable
    header_24_hour: Optional[str] = None

    def header_for(self, use_24_hour):
        if use_24_hour and self.header_24_hour:
            return self.header_24_hour
        return self.header


@dataclass(frozen=True)
class ReportColumn:
    id: str
    header: str
    width: int


@dataclass
class ReportTable:
    columns: list
    rows: list

    @property
    def headers(self):
        return [column.header for column in self.columns]

    def values(self):
        """Rows as lists, in column order."""
        return [[row[column.id] for column in self.columns] for row in self.rows]


def format_clock(value):
    return value.strftime('%H:%M')


def format_clock_12_hour(value):
    """HH:MMam / HH:MMpm, midnight and noon shown as 12."""
    hour = value.hour % 12 or 12
    suffix = 'pm' if value.hour >= 12 else 'am'
    return '%02d:%02d%s' % (hour, value.minute, suffix)


def duration_minutes(entry, ctx):
    """Whole minutes between start and end, halves rounded up."""
    elapsed_ms = (ctx.end_of(entry) - entry.start).total_seconds() * 1000
    return int(math.floor(elapsed_ms / 60000 + 0.5))


def _hours(entry, ctx):
    return duration_minutes(entry, ctx) / 60


def _amount(entry, ctx):
    rate = float(entry.hourly_rate or 0) if entry.is_billable else 0.0
    return rate * _hours(entry, ctx)


def _time_range(entry, ctx):
    start = ctx.local(entry.start)
    end = ctx.local(ctx.end_of(entry))
    if ctx.use_24_hour:
        return f'{format_clock(start)}-{format_clock(end)}'
    return f'{format_clock_12_hour(start)} – {format_clock_12_hour(end)}'


FIELDS = {
    field.id: field for field in (
        ReportField('date', 'Date (YYYY-MM-DD)', 15,
                    lambda entry, ctx: ctx.local(entry.start).date().isoformat()),
        ReportField('project', 'Project', 20,
                    lambda entry, ctx: entry.project_name or NO_PROJECT),
        ReportField('task', 'Task', 20,
                    lambda entry, ctx: entry.task_name or NO_TASK),
        ReportField('description', 'Description', 30,
                    lambda entry, ctx: entry.note or ''),
        ReportField('startTime', 'Start time (HH:MM)', 20,
                    lambda entry, ctx: format_clock(ctx.local(entry.start))),
        ReportField('endTime', 'End time (HH:MM)', 20,
                    lambda entry, ctx: format_clock(ctx.local(ctx.end_of(entry)))),
        ReportField('duration', 'Duration (minutes)', 15, duration_minutes),
        ReportField('hours', 'Duration (hours)', 15,
                    lambda entry, ctx: f'{_hours(entry, ctx):.2f}'),
        ReportField('amount', 'Amount', 15,
                    lambda entry, ctx: f'{_amount(entry, ctx):.2f}'),
        ReportField('time', 'Time (HH:MMam – HH:MMpm)', 25, _time_range,
                    header_24_hour='Time (HH:MM-HH:MM)'),
    )
}


def resolve_fields(field_ids):
    """
    Map identifiers to registry fields, keeping the caller's order.

    Unknown and repeated identifiers are dropped. When nothing usable is
    left the default field set is returned.
    """
    resolved = []
    seen = set()
    for field_id in field_ids or ():
        field = FIELDS.get(field_id)
        if field is None or field_id in seen:
            continue
        seen.add(field_id)
        resolved.append(field)
    if not resolved:
        resolved = [FIELDS[field_id] for field_id in DEFAULT_FIELDS]
    return resolved


def build_rows(entries, fields, user_tz, use_24_hour=False, now=None):
    """One dict per entry, keyed by field id in field order."""
    ctx = RenderContext(user_tz=user_tz, use_24_hour=use_24_hour, now=now or timezone.now())
    return [
        {field.id: field.getter(entry, ctx) for field in fields}
        for entry in entries
    ]


def build_report(entries, field_ids, user_tz, use_24_hour=False, now=None):
    """Resolve ``field_ids`` and build the columns and rows of a report."""
    fields = resolve_fields(field_ids)
    columns = [ReportColumn(field.id, field.header_for(use_24_hour), field.width) for field in fields]
    rows = build_rows(entries, fields, user_tz, use_24_hour=use_24_hour, now=now)
    return ReportTable(columns=columns, rows=rows)
