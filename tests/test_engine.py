import random
from collections import Counter

import pytest

from wordspy.services.game import engine
from wordspy.services.game.topics import TOPICS, get_topic, list_topics


@pytest.mark.parametrize('mode,n,expected', [
    ('similar-word', 2, {'similar': 1, 'normal': 1}),
    ('similar-word', 6, {'similar': 1, 'normal': 5}),
    ('impostor', 3, {'impostor': 1, 'normal': 2}),
    ('impostor', 8, {'impostor': 1, 'normal': 7}),
    ('mixed', 5, {'similar': 1, 'impostor': 1, 'normal': 3}),
    ('mixed', 8, {'similar': 1, 'impostor': 1, 'normal': 6}),
])
def test_spin_order_has_one_of_each_decoy(mode, n, expected):
    order = engine.build_spin_order(mode, n, random.Random(n))
    assert len(order) == n
    assert Counter(order) == expected


def test_spin_order_rejects_too_few_players():
    with pytest.raises(ValueError):
        engine.build_spin_order('mixed', 1, random.Random(0))


def test_shuffle_is_a_permutation_and_leaves_input_alone():
    items = list(range(20))
    shuffled = engine.shuffle(items, random.Random(42))
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_shuffle_spreads_the_decoy():
    rng = random.Random(7)
    positions = Counter(engine.build_spin_order('impostor', 4, rng).index('impostor') for _ in range(400))
    assert set(positions) == {0, 1, 2, 3}


def test_normalize_mode_accepts_alias_and_rejects_unknown():
    assert engine.normalize_mode('Imposter') == 'impostor'
    assert engine.normalize_mode(' mixed ') == 'mixed'
    assert engine.normalize_mode('chaos') is None
    assert engine.normalize_mode(None) is None


def test_min_players_per_mode():
    assert engine.min_players('similar-word') == 2
    assert engine.min_players('impostor') == 3
    assert engine.min_players('mixed') == 5


def test_common_letter_count_uses_each_letter_once():
    assert engine.common_letter_count('otter', 'hotter') == 5
    assert engine.common_letter_count('aaa', 'a') == 1
    assert engine.common_letter_count('abc', 'xyz') == 0


def test_word_similarity():
    assert engine.are_words_similar('Otter', 'Hotter')
    assert engine.are_words_similar('Mouse', 'moose')
    assert not engine.are_words_similar('Lion', 'Whale')
    assert not engine.are_words_similar('', 'Lion')


def test_find_similar_word_prefers_similar_words():
    words = ['Otter', 'Hotter', 'Zebra']
    for seed in range(10):
        assert engine.find_similar_word(words, 'Otter', random.Random(seed)) == 'Hotter'


def test_find_similar_word_falls_back_to_another_word():
    assert engine.find_similar_word(['Lion', 'Kiwi'], 'Lion', random.Random(0)) == 'Kiwi'
    assert engine.find_similar_word(['Lion'], 'Lion', random.Random(0)) is None


def test_word_for_tag():
    assert engine.word_for_tag('normal', 'Lion', 'Lynx') == 'Lion'
    assert engine.word_for_tag('similar', 'Lion', 'Lynx') == 'Lynx'
    assert engine.word_for_tag('impostor', 'Lion', 'Lynx') == engine.IMPOSTOR_PLACEHOLDER


def test_topics_have_enough_words():
    for topic_id, topic in TOPICS.items():
        assert len(topic['words']) >= 8, topic_id
        assert get_topic(topic_id.upper()) is topic
    assert get_topic('nope') is None
    assert {t['id'] for t in list_topics()} == set(TOPICS)
