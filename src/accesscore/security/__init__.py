"""Guard and filter surfaces consumed by the request/UI layer.

Usage::

    from accesscore.security import AccessContext

    ctx = AccessContext.from_store(store, session=session)

    decision = ctx.guard.evaluate("project", "edit", project_id)
    if decision.denied:
        flash(decision.reason)
        return redirect(decision.redirect_target)

    tasks = ctx.filter.apply(rows, "task")
"""

from .context import AccessContext
from .filter import AccessFilter
from .guard import AccessGuard, GuardDecision

__all__ = [
    "AccessContext",
    "AccessFilter",
    "AccessGuard",
    "GuardDecision",
]
