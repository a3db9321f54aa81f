from markov_graph.models.ordered_map import OrderedMap


class ChainNode:
    """
    A single word in a MarkovChain together with its outgoing edges.

    Attributes:
        text (str): The word this node stands for. Empty for the root.
        id (int): Identifier unique within the owning chain.
        edges (OrderedMap): Neighbor id -> number of observed adjacencies
            from this node to that neighbor, in the order edges were created.
    """

    def __init__(self, text, node_id):
        self._text = text
        self._id = node_id
        self.edges = OrderedMap()

    @property
    def text(self):
        return self._text

    @property
    def id(self):
        return self._id

    def weight_to(self, neighbor_id):
        """
        Weight of the edge to ``neighbor_id``.

        Args:
            neighbor_id (int): Target node id

        Returns:
            int: The edge weight, or 0 if no such edge exists
        """
        return self.edges.get(neighbor_id, 0)

    def out_weight(self):
        """Sum of the weights of every outgoing edge."""
        return sum(self.edges.values())

    def out_degree(self):
        return len(self.edges)

    def __repr__(self):
        return f"ChainNode(id={self._id}, text={self._text!r}, edges={len(self.edges)})"
