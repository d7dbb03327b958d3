"""Minimal host object tree used to bound trove lifetimes.

Instances form a parent/children tree rooted at a DataModel. Destroying an
instance fires its ``destroying`` signal, destroys its descendants and
detaches it from its parent.
"""

from __future__ import annotations

import logging

from trove.signals import Signal

logger = logging.getLogger(__name__)


class Instance:
    """Node in the host object tree.

    Parameters
    ----------
    name : str
        Node name.
    parent : Instance | None
        Optional parent to attach to on creation.

    Attributes
    ----------
    destroying : Signal
        Fired once, before the instance and its descendants are torn down.
    """

    def __init__(self, name: str = "Instance", parent: Instance | None = None) -> None:
        self.name = name
        self.children: list[Instance] = []
        self.destroying = Signal(f"{name}.destroying")
        self.destroyed = False
        self._parent: Instance | None = None
        if parent is not None:
            self.parent = parent

    @property
    def parent(self) -> Instance | None:
        return self._parent

    @parent.setter
    def parent(self, new_parent: Instance | None) -> None:
        if self.destroyed and new_parent is not None:
            raise RuntimeError(f"Cannot reparent destroyed instance {self.name!r}")
        if new_parent is self or (new_parent is not None and new_parent.is_descendant_of(self)):
            raise ValueError(f"Cannot parent {self.name!r} to itself or a descendant")

        if self._parent is not None:
            self._parent.children.remove(self)
        self._parent = new_parent
        if new_parent is not None:
            new_parent.children.append(self)

    def is_descendant_of(self, ancestor: Instance) -> bool:
        """Return True when ancestor is above this instance in the tree."""
        node = self._parent
        while node is not None:
            if node is ancestor:
                return True
            node = node._parent
        return False

    def clone(self) -> Instance:
        """Duplicate this instance and its subtree, without a parent.

        Subclasses must accept ``name`` as a keyword argument.
        """
        duplicate = type(self)(name=self.name)
        for child in self.children:
            child.clone().parent = duplicate
        return duplicate

    def destroy(self) -> None:
        """Tear down this instance and its descendants. Safe to call twice."""
        if self.destroyed:
            return
        self.destroyed = True
        logger.debug("Destroying instance %s", self.name)

        self.destroying.fire()
        for child in list(self.children):
            child.destroy()
        self.parent = None
        self.destroying.disconnect_all()

    Destroy = destroy
    Clone = clone

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class DataModel(Instance):
    """Root of a host object tree."""

    def __init__(self, name: str = "game", parent: Instance | None = None) -> None:
        super().__init__(name=name, parent=parent)


game = DataModel()
"""Default hierarchy root checked by Trove.attach_to_lifecycle."""
