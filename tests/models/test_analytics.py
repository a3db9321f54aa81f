import copy
import numpy as np
import pytest
from unittest.mock import MagicMock

from markov_graph.models.analytics import ChainAnalytics
from markov_graph.models.markov_chain import MarkovChain
from markov_graph.utils.config_loader import DEFAULT_CONFIG


@pytest.fixture
def trained_chain():
    chain = MarkovChain(config=copy.deepcopy(DEFAULT_CONFIG), logger=MagicMock())
    chain.train_sequence("the cat sat on the mat the cat ran".split())
    return chain


@pytest.fixture
def analytics(trained_chain):
    return ChainAnalytics(trained_chain, logger=MagicMock())


def test_vocabulary_in_creation_order(analytics):
    assert analytics.vocabulary() == ["the", "cat", "sat", "on", "mat", "ran"]


def test_analyze_model(analytics):
    stats = analytics.analyze_model()

    assert stats["node_count"] == 6
    # the->cat, the->mat, cat->sat, cat->ran, sat->on, on->the, mat->the
    assert stats["edge_count"] == 7
    assert stats["total_weight"] == 8
    assert stats["vocabulary_size"] == 6
    assert stats["max_out_degree"] == 2
    assert stats["mean_out_degree"] == pytest.approx(7 / 6)
    assert stats["top_transitions"][0] == ("the", "cat", 2)
    analytics.logger.info.assert_called_once_with(
        "Model analysis completed", extra={"metrics": stats})


def test_analyze_empty_chain():
    chain = MarkovChain(config=copy.deepcopy(DEFAULT_CONFIG), logger=MagicMock())
    stats = ChainAnalytics(chain, logger=MagicMock()).analyze_model()

    assert stats["node_count"] == 0
    assert stats["edge_count"] == 0
    assert stats["mean_out_degree"] == 0.0
    assert stats["top_transitions"] == []


def test_top_transitions_limit_and_ties(analytics):
    top = analytics.top_transitions(n=3)
    assert top == [("the", "cat", 2), ("the", "mat", 1), ("cat", "sat", 1)]


def test_top_n_defaults_to_config(trained_chain):
    trained_chain.config["analytics"]["top_n"] = 2
    analytics = ChainAnalytics(trained_chain, logger=MagicMock())
    assert len(analytics.top_transitions()) == 2


def test_top_n_zero_is_respected(trained_chain):
    assert ChainAnalytics(trained_chain, logger=MagicMock()).top_transitions(n=0) == []

    analytics = ChainAnalytics(trained_chain, logger=MagicMock(), top_n=0)
    assert analytics.top_transitions() == []
    assert analytics.analyze_model()["top_transitions"] == []


def test_explicit_top_n_overrides_config(trained_chain):
    analytics = ChainAnalytics(trained_chain, logger=MagicMock(), top_n=1)
    assert analytics.top_transitions() == [("the", "cat", 2)]


def test_weight_matrix(analytics):
    matrix, vocabulary = analytics.weight_matrix()
    the, cat, mat = (vocabulary.index(w) for w in ("the", "cat", "mat"))

    assert matrix.shape == (6, 6)
    assert matrix.dtype == np.int64
    assert matrix[the, cat] == 2
    assert matrix[the, mat] == 1
    assert matrix[mat, the] == 1
    assert matrix.sum() == analytics.markov_chain.total_weight


def test_transition_matrix_rows(analytics):
    matrix, vocabulary = analytics.transition_matrix()
    the, cat, ran = (vocabulary.index(w) for w in ("the", "cat", "ran"))

    assert matrix.dtype == np.float32
    assert matrix[the, cat] == pytest.approx(2 / 3)
    assert matrix[the].sum() == pytest.approx(1.0)
    # "ran" ends the text and has no outgoing edges
    assert not matrix[ran].any()
