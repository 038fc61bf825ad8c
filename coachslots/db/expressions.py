# coachslots/db/expressions.py
"""
SQL expressions whose spelling differs between PostgreSQL and SQLite.
"""
import sqlalchemy as sa
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement


class add_minutes(FunctionElement):
    """``add_minutes(ts, n)``: the timestamp ``ts`` shifted by ``n`` minutes."""

    type = sa.DateTime(timezone=True)
    name = "add_minutes"
    inherit_cache = True


@compiles(add_minutes)
def _add_minutes_postgresql(element, compiler, **kw):
    ts, minutes = list(element.clauses)
    return "(%s + make_interval(mins => %s))" % (
        compiler.process(ts, **kw),
        compiler.process(minutes, **kw),
    )


@compiles(add_minutes, "sqlite")
def _add_minutes_sqlite(element, compiler, **kw):
    # Result keeps SQLAlchemy's "YYYY-MM-DD HH:MM:SS" prefix, so text comparison
    # against bound DateTime values stays chronological
    ts, minutes = list(element.clauses)
    return "datetime(%s, '+' || %s || ' minutes')" % (
        compiler.process(ts, **kw),
        compiler.process(minutes, **kw),
    )


def ends_after(scheduled_at, duration_minutes, default_minutes: int, instant):
    """``scheduled_at + COALESCE(duration, default) minutes > instant``."""
    minutes = sa.func.coalesce(duration_minutes, sa.cast(default_minutes, sa.Integer))
    return add_minutes(scheduled_at, minutes) > instant
