from joytyping.interpreter.speech.word_tree import FallbackWordTree, WordTree


def commands():
    t = WordTree()
    t.set(["turn", "off", "screen"], "A")
    t.set(["turn", "off", "sound"], "B")
    t.set(["turn", "off", "the", "computer"], "C")
    return t


def test_exact_paths_match_with_full_cost():
    t = commands()
    assert t.scan(["turn", "off", "screen"]) == (3, "A", True)
    assert t.scan(["turn", "off", "sound", "now"]) == (3, "B", True)
    assert t.scan(["turn", "off", "the", "computer"]) == (4, "C", True)


def test_incomplete_path_without_ancestor_leaf_is_no_match():
    t = commands()
    assert t.scan(["turn", "off", "the", "lights"]) == (0, None, False)
    assert t.scan(["turn"]) == (0, None, False)


def test_failed_longer_path_falls_back_to_ancestor_leaf():
    t = WordTree()
    t.set(["turn", "off"], "OFF")
    t.set(["turn", "off", "the", "computer"], "C")

    # "the" has no leaf and "lights" has no child, so the "off" leaf wins
    assert t.scan(["turn", "off", "the", "lights"]) == (2, "OFF", True)
    assert t.scan(["turn", "off", "screen"]) == (2, "OFF", True)
    assert t.scan(["turn", "off", "the", "computer"]) == (4, "C", True)


def test_set_overwrites_leaf():
    t = WordTree()
    t.set(["a", "b"], 1)
    t.set(["a", "b"], 2)
    assert t.scan(["a", "b"]) == (2, 2, True)


def test_falsy_leaf_still_matches():
    t = WordTree()
    t.set(["zero"], 0)
    assert t.scan(["zero"]) == (1, 0, True)


def test_empty_input_never_matches():
    assert commands().scan([]) == (0, None, False)


def test_fallback_returned_for_unmatched_input():
    t = FallbackWordTree()
    t.set_fallback("typing")
    assert t.scan(["whatever"]) == (0, "typing", True)

    t.set(["hello"], "H")
    assert t.scan(["hello", "x"]) == (1, "H", True)
    assert t.scan(["x", "hello"]) == (0, "typing", True)


def test_fallback_tree_without_fallback_behaves_like_plain_tree():
    t = FallbackWordTree()
    t.set(["hello"], "H")
    assert t.scan(["bye"]) == (0, None, False)
