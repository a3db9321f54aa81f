import sys
import time

from markov_graph.models.chain_node import ChainNode
from markov_graph.nlps.text_preprocessor import TextPreprocessor
from markov_graph.utils.config_loader import (
    DEFAULT_CONFIG,
    load_config,
    merge_config,
    validate_config,
)
from markov_graph.utils.loggers.json_logger import get_logger_from_config, log_json

ROOT_ID = 0


class MarkovChain:
    """
    A weighted word-transition graph built from training text.

    Every distinct word becomes a ChainNode. Recording the adjacency
    (A, B) adds or strengthens the directed edge A -> B by one, so an edge's
    weight is the number of times B was seen right after A.

    Nodes live in a single arena list indexed by id: slot 0 holds the root
    sentinel, slot ``i`` holds the node with id ``i``. A word index maps each
    interned word to its id. `total_weight` always equals the sum of every
    edge weight in the chain.
    """

    def __init__(self, environment="development", config=None, logger=None,
                 preprocessor=None):
        """
        Initializes an empty chain holding only the root node.

        Args:
            environment (str): Which config environment to load when no
                config is given ('development' or 'test')
            config (dict, optional): Already loaded configuration
            logger (Logger, optional): Logger for training activity. Built
                from the config's logging section when omitted.
            preprocessor (TextPreprocessor, optional): Normalizer used by
                `train_text`. Built from the config when omitted.

        Raises:
            ValueError: If the configuration is invalid or the preprocessor
                cannot be created
        """
        self.environment = environment
        if config is None:
            config = load_config(environment)
        else:
            config = merge_config(DEFAULT_CONFIG, config)
            validate_config(config)
        self.config = config
        self.on_unknown_source = config["chain"]["on_unknown_source"]

        if logger is None:
            logger = get_logger_from_config(
                "markov_graph.chain", config["logging"])
        self.logger = logger

        if preprocessor is None:
            try:
                preprocessor = TextPreprocessor.from_config(config)
            except ValueError as e:
                self.logger.error(f"Failed to initialize TextPreprocessor: {e}")
                raise ValueError(
                    "TextPreprocessor initialization failed, which is required for train_text") from e
        self.preprocessor = preprocessor

        self._arena = [ChainNode("", ROOT_ID)]
        self._ids_by_word = {}
        self._total_weight = 0
        self._next_id = ROOT_ID + 1

        self.logger.info("MarkovChain initialized", extra={
            "metrics": {
                "environment": environment,
                "on_unknown_source": self.on_unknown_source,
                "preprocessing_steps": list(self.preprocessor.steps),
            }
        })

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def root(self):
        return self._arena[ROOT_ID]

    @property
    def nodes(self):
        """Every non-root node, in creation order."""
        return self._arena[1:]

    @property
    def total_weight(self):
        return self._total_weight

    @property
    def next_id(self):
        return self._next_id

    def __len__(self):
        return len(self._arena) - 1

    def node_by_id(self, node_id):
        """
        Resolve an id to its node.

        Raises:
            KeyError: If no node holds ``node_id``
        """
        if (isinstance(node_id, bool) or not isinstance(node_id, int)
                or not 0 <= node_id < len(self._arena)):
            raise KeyError(f"no node with id {node_id!r} in MarkovChain")
        return self._arena[node_id]

    def has_word(self, word):
        return word in self._ids_by_word

    def get_node(self, word):
        """Return the node for ``word``, or None if the word is unknown."""
        node_id = self._ids_by_word.get(word)
        if node_id is None:
            return None
        return self._arena[node_id]

    def edge_weight(self, from_word, to_word):
        """Weight of the edge from_word -> to_word, 0 when either side is unknown."""
        source = self.get_node(from_word)
        target = self.get_node(to_word)
        if source is None or target is None:
            return 0
        return source.weight_to(target.id)

    def transitions(self, word):
        """
        Outgoing transitions of ``word``.

        Returns:
            list of (str, int): Neighbor word and edge weight, in the order
                the edges were created. Empty for unknown words.
        """
        node = self.get_node(word)
        if node is None:
            return []
        return [(self._arena[neighbor_id].text, weight)
                for neighbor_id, weight in node.edges.items()]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _check_word(self, word, role):
        if not isinstance(word, str):
            raise TypeError(
                f"{role} word must be a str, got {type(word).__name__}")
        if not word:
            raise ValueError(f"{role} word must not be empty")

    def _create_node(self, word):
        word = sys.intern(word)
        node = ChainNode(word, self._next_id)
        self._arena.append(node)
        self._ids_by_word[word] = node.id
        self._next_id += 1
        self.logger.debug("Node created", extra={
            "metrics": {"word": word, "node_id": node.id}
        })
        return node

    def add_node(self, word):
        """
        Return the node for ``word``, creating it if the word is new.

        Args:
            word (str): Non-empty word

        Returns:
            ChainNode: The existing or newly created node
        """
        self._check_word(word, "Node")
        node = self.get_node(word)
        if node is None:
            node = self._create_node(word)
        return node

    def train_word(self, from_word, to_word):
        """
        Record one observed adjacency from ``from_word`` to ``to_word``.

        A known edge gains one unit of weight; an unseen edge is added with
        weight 1, creating the target node if needed. Either way
        `total_weight` grows by exactly 1.

        Args:
            from_word (str): Source word
            to_word (str): Word observed right after the source

        Returns:
            int: Weight of the edge after recording

        Raises:
            TypeError: If either word is not a string
            ValueError: If either word is empty, or the source word has no
                node and the chain is configured with
                ``on_unknown_source: error``. The chain is unchanged.
        """
        self._check_word(from_word, "Source")
        self._check_word(to_word, "Target")

        source = self.get_node(from_word)
        if source is None:
            if self.on_unknown_source == "error":
                self.logger.error("Unknown source word", extra={
                    "metrics": {"from_word": from_word, "to_word": to_word}
                })
                raise ValueError(
                    f"Unknown source word '{from_word}': add it with add_node first")
            source = self._create_node(from_word)

        target = self.get_node(to_word)
        if target is not None and source.edges.has(target.id):
            source.edges[target.id] += 1
        else:
            if target is None:
                target = self._create_node(to_word)
            source.edges.insert(target.id, 1)

        self._total_weight += 1
        weight = source.edges[target.id]

        self.logger.debug("Adjacency recorded", extra={
            "metrics": {
                "from_id": source.id,
                "to_id": target.id,
                "weight": weight,
                "total_weight": self._total_weight,
            }
        })
        return weight

    def train_sequence(self, words):
        """
        Record every consecutive pair of an already tokenized word sequence.

        The first word is added as a node before training, so every source
        in the sequence is known by the time it is used.

        Args:
            words (iterable of str): Tokens in reading order

        Returns:
            int: Number of adjacencies recorded

        Raises:
            TypeError: If any token is not a string
            ValueError: If any token is empty. Nothing is recorded.
        """
        words = list(words)
        if len(words) < 2:
            return 0

        # Reject the whole sequence before recording anything
        for word in words:
            self._check_word(word, "Sequence")

        self.add_node(words[0])
        recorded = 0
        for from_word, to_word in zip(words, words[1:]):
            self.train_word(from_word, to_word)
            recorded += 1
        return recorded

    def train_text(self, text):
        """
        Normalize raw text, tokenize it, and train on the resulting words.

        Args:
            text (str): Raw training text

        Returns:
            dict: Training statistics
        """
        start_time = time.time()
        words = self.preprocessor.to_tokens(text)

        if len(words) < 2:
            self.logger.warning("Text too short for training", extra={
                "metrics": {"text_length": len(words), "min_required": 2}
            })

        recorded = self.train_sequence(words)
        training_time = time.time() - start_time

        stats = {
            "word_count": len(words),
            "transitions_recorded": recorded,
            "node_count": len(self),
            "total_weight": self._total_weight,
            "training_time": training_time,
        }
        log_json(self.logger, "Training completed", stats)
        return stats

    def train(self, text_input):
        """
        Train on a single text or a list of texts.

        Texts in a list are trained one after another; no adjacency is
        recorded across the boundary between two texts.

        Args:
            text_input (str or list): Text or texts to train on

        Returns:
            dict: Combined training statistics

        Raises:
            ValueError: If text_input is neither a string nor a list of strings
        """
        if isinstance(text_input, str):
            texts = [text_input]
        elif isinstance(text_input, list) and all(isinstance(t, str) for t in text_input):
            texts = text_input
        else:
            error_msg = "text_input must be a string or a list of strings"
            self.logger.error(error_msg, extra={
                "metrics": {"input_type": type(text_input).__name__}
            })
            raise ValueError(error_msg)

        start_time = time.time()
        word_count = 0
        recorded = 0
        for text in texts:
            stats = self.train_text(text)
            word_count += stats["word_count"]
            recorded += stats["transitions_recorded"]

        return {
            "total_texts": len(texts),
            "word_count": word_count,
            "transitions_recorded": recorded,
            "node_count": len(self),
            "total_weight": self._total_weight,
            "training_time": time.time() - start_time,
        }
