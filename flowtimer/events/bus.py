"""Hierarchical, synchronous publish/subscribe.

Nodes form a tree.  Feature objects (the countdown engine, lifecycle
recovery) own a child node; cross-cutting concerns (alert routing,
navigation) subscribe on the root.

Dispatch
--------
``raise_event``   local handlers in registration order, then the parent.
                  With ``Propagation.UNHANDLED`` the parent only sees
                  events no local handler claimed; with ``ALWAYS`` it
                  sees every event.
``propagate``     local handlers, then every child in attach order.
                  Used to broadcast host lifecycle events downward.

A node holds only a weak reference to its parent.  ``close()`` cancels
every subscription, closes the children and detaches from the parent,
so no handler fires after teardown.
"""

from __future__ import annotations

import weakref
from enum import Enum, auto
from typing import Callable

from .types import DomainEvent, EventCategory


Handler = Callable[[DomainEvent], None]


class Propagation(Enum):
    UNHANDLED = auto()
    ALWAYS = auto()


class Subscription:
    """Handle returned by ``EventNode.subscribe``."""

    def __init__(self, node: EventNode, category: EventCategory, handler: Handler) -> None:
        self._node = node
        self.category = category
        self.handler = handler
        self.active = True

    def cancel(self) -> None:
        self._node.unsubscribe(self)

    def __repr__(self) -> str:
        return (
            f"<Subscription category={self.category.value} "
            f"active={self.active}>"
        )


class EventNode:

    def __init__(
        self,
        parent: EventNode | None = None,
        *,
        propagation: Propagation = Propagation.UNHANDLED,
    ) -> None:
        self._propagation = propagation
        self._subscriptions: dict[EventCategory, list[Subscription]] = {}
        self._children: list[EventNode] = []
        self._parent_ref: weakref.ref[EventNode] | None = None
        self._closed = False
        if parent is not None:
            parent._attach(self)

    # ── tree ──────────────────────────────────────────────────────────

    @property
    def parent(self) -> EventNode | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> tuple[EventNode, ...]:
        return tuple(self._children)

    @property
    def closed(self) -> bool:
        return self._closed

    def _attach(self, child: EventNode) -> None:
        if self._closed:
            raise RuntimeError("cannot attach a child to a closed EventNode")
        child._parent_ref = weakref.ref(self)
        self._children.append(child)

    def _detach(self, child: EventNode) -> None:
        if child in self._children:
            self._children.remove(child)
        child._parent_ref = None

    # ── subscriptions ─────────────────────────────────────────────────

    def subscribe(self, category: EventCategory, handler: Handler) -> Subscription:
        if self._closed:
            raise RuntimeError("cannot subscribe on a closed EventNode")
        sub = Subscription(self, category, handler)
        self._subscriptions.setdefault(category, []).append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        """Release *subscription*.  Unknown or already-cancelled handles
        are ignored."""
        subscription.active = False
        subs = self._subscriptions.get(subscription.category)
        if subs and subscription in subs:
            subs.remove(subscription)

    def handler_count(self, category: EventCategory) -> int:
        return len(self._subscriptions.get(category, ()))

    # ── dispatch ──────────────────────────────────────────────────────

    def raise_event(self, event: DomainEvent) -> bool:
        """Dispatch *event* here, then bubble it up.

        Returns True when at least one handler on the path ran.
        """
        if self._closed:
            return False
        handled = self._dispatch_local(event)
        if handled and self._propagation is Propagation.UNHANDLED:
            return True
        parent = self.parent
        if parent is not None:
            handled = parent.raise_event(event) or handled
        return handled

    def propagate(self, event: DomainEvent) -> bool:
        """Dispatch *event* here, then to every descendant."""
        if self._closed:
            return False
        handled = self._dispatch_local(event)
        for child in list(self._children):
            handled = child.propagate(event) or handled
        return handled

    def _dispatch_local(self, event: DomainEvent) -> bool:
        # Snapshot: handlers added mid-dispatch wait for the next event.
        subs = list(self._subscriptions.get(event.category, ()))
        ran = False
        for sub in subs:
            if not sub.active:
                continue
            sub.handler(event)
            ran = True
        return ran

    # ── teardown ──────────────────────────────────────────────────────

    def close(self) -> None:
        if self._closed:
            return
        for child in list(self._children):
            child.close()
        for subs in self._subscriptions.values():
            for sub in subs:
                sub.active = False
        self._subscriptions.clear()
        parent = self.parent
        if parent is not None:
            parent._detach(self)
        self._closed = True

    def __enter__(self) -> EventNode:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        total = sum(len(s) for s in self._subscriptions.values())
        return (
            f"<EventNode handlers={total} children={len(self._children)} "
            f"closed={self._closed}>"
        )
