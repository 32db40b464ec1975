from alignment.serializer import serialize_timestamps
from alignment.sorter import sort_words
from timestamp_types import AlignedWord


def test_serialize_sorted_scenario(spoken_words):
    timestamps = serialize_timestamps(sort_words(spoken_words))
    assert timestamps.start_list == "1.0,0.5,0.0,"
    assert timestamps.end_list == "1.6,1.0,0.5,"


def test_one_entry_per_word(spoken_words):
    timestamps = serialize_timestamps(spoken_words)
    assert timestamps.count() == len(spoken_words)

    tokens = timestamps.start_list.split(",")
    assert tokens[-1] == ""
    assert [float(t) for t in tokens[:-1]] == [w.start_time for w in spoken_words]


def test_serialize_empty():
    timestamps = serialize_timestamps([])
    assert timestamps.start_list == ""
    assert timestamps.end_list == ""
    assert timestamps.count() == 0


def test_serialize_keeps_precision():
    timestamps = serialize_timestamps([AlignedWord("hi", 12.34, 12.9)])
    assert timestamps.start_list == "12.34,"
    assert timestamps.end_list == "12.9,"
