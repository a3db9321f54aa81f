import time
import uuid

import numpy as np

from markov_graph.utils.loggers.json_logger import get_logger, log_json


class ChainAnalytics:
    """
    Read-only statistics and matrix views over a trained MarkovChain.

    Matrices index words in node creation order and leave out the root,
    so row ``i`` belongs to the node with id ``i + 1``.
    """

    def __init__(self, markov_chain, logger=None, top_n=None):
        """
        Initialize with a reference to a MarkovChain instance.

        Args:
            markov_chain: The chain to analyze
            logger: Logger for analytics output. Defaults to the
                "markov_graph.analytics" JSON logger.
            top_n (int, optional): How many transitions `analyze_model`
                reports. Defaults to the chain's ``analytics.top_n`` setting.
        """
        self.logger = logger or get_logger("markov_graph.analytics")
        self.markov_chain = markov_chain
        if top_n is None:
            top_n = markov_chain.config["analytics"]["top_n"]
        self.top_n = top_n
        self.analytics_id = str(uuid.uuid4())[:8]

    def vocabulary(self):
        """Words of every non-root node, in creation order."""
        return [node.text for node in self.markov_chain.nodes]

    def top_transitions(self, n=None):
        """
        The heaviest edges in the chain.

        Args:
            n (int, optional): Number of edges to return

        Returns:
            list of (str, str, int): ``(from_word, to_word, weight)`` sorted by
                weight, heaviest first. Ties keep creation order.
        """
        if n is None:
            n = self.top_n
        chain = self.markov_chain
        edges = [
            (node.text, chain.node_by_id(neighbor_id).text, weight)
            for node in chain.nodes
            for neighbor_id, weight in node.edges.items()
        ]
        edges.sort(key=lambda edge: edge[2], reverse=True)
        return edges[:n]

    def analyze_model(self):
        """
        Summarize the chain's size and shape.

        Returns:
            dict: A dictionary containing:
                - node_count: Non-root nodes
                - edge_count: Distinct directed edges
                - total_weight: Sum of all edge weights
                - vocabulary_size: Distinct words
                - mean_out_degree / max_out_degree: Edges per node
                - top_transitions: Heaviest edges, see `top_transitions`
                - analysis_time: Seconds spent
        """
        start_time = time.time()
        nodes = self.markov_chain.nodes
        out_degrees = np.array([node.out_degree() for node in nodes], dtype=np.int64)

        stats = {
            "analytics_id": self.analytics_id,
            "node_count": len(nodes),
            "edge_count": int(out_degrees.sum()) if len(nodes) else 0,
            "total_weight": self.markov_chain.total_weight,
            "vocabulary_size": len(set(self.vocabulary())),
            "mean_out_degree": float(out_degrees.mean()) if len(nodes) else 0.0,
            "max_out_degree": int(out_degrees.max()) if len(nodes) else 0,
            "top_transitions": self.top_transitions(),
        }
        stats["analysis_time"] = time.time() - start_time

        log_json(self.logger, "Model analysis completed", stats)
        return stats

    def weight_matrix(self):
        """
        Dense matrix of raw edge weights.

        Returns:
            tuple: ``(matrix, vocabulary)`` where ``matrix[i, j]`` is the weight
                of the edge from ``vocabulary[i]`` to ``vocabulary[j]``
        """
        nodes = self.markov_chain.nodes
        size = len(nodes)
        matrix = np.zeros((size, size), dtype=np.int64)

        for node in nodes:
            for neighbor_id, weight in node.edges.items():
                matrix[node.id - 1, neighbor_id - 1] = weight

        return matrix, self.vocabulary()

    def transition_matrix(self):
        """
        Row-normalized transition probabilities.

        Rows of words with no outgoing edges stay all zero.

        Returns:
            tuple: ``(matrix, vocabulary)`` with a float32 matrix whose non-empty
                rows sum to 1
        """
        weights, vocabulary = self.weight_matrix()
        row_totals = weights.sum(axis=1, keepdims=True)
        matrix = np.divide(
            weights,
            row_totals,
            out=np.zeros(weights.shape, dtype=np.float64),
            where=row_totals > 0,
        ).astype(np.float32)

        self.logger.debug("Transition matrix built", extra={
            "metrics": {
                "vocab_size": len(vocabulary),
                "non_zero_transitions": int(np.count_nonzero(matrix)),
            }
        })
        return matrix, vocabulary
