from itertools import count
from weakref import WeakValueDictionary


class NodeDb:
    """
    Collection of observable nodes, tracked by the surrogate id that is
    assigned to each node when it is created. Nodes are held weakly: a
    root node lives as long as the caller holds it, a nested node as long
    as its parent memoizes it or the caller holds it.

    Channels are keyed on these ids, so a node that is no longer stored in
    its parent keeps working for the reactions that read through it.
    Subscriptions to nodes that are not read anymore are removed when the
    reactions that made them run again.
    """

    __slots__ = ("db", "_ids")

    def __init__(self):
        self.db = WeakValueDictionary()
        self._ids = count()

    def next_id(self):
        return next(self._ids)

    def reference(self, node):
        """
        Adds the node to the collection under its id
        """
        node_id = node.__id__
        existing = self.db.setdefault(node_id, node)
        if existing is not node:
            raise RuntimeError(f"Node with id {node_id} already in db")

    def get(self, node_id):
        return self.db.get(node_id)

    def clear(self):
        self.db = WeakValueDictionary()

    def __len__(self):
        return len(self.db)

    def __contains__(self, node):
        return self.db.get(node.__id__) is node


# Create a global node collection
node_db = NodeDb()
